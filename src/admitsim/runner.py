from __future__ import annotations

from typing import Any, Callable, List, Union

from .simulation import Simulation


def run(
    sim_or_factory: Union[Simulation, Callable[[], Simulation]],
    *,
    until: float | None = None,
    ticks: int | None = None,
    number_runs: int = 1,
    **kwargs: Any,
):
    """Run one or many server simulations.

    Parameters
    ----------
    sim_or_factory:
        Either

        - a ready-made :class:`admitsim.simulation.Simulation`, or
        - a *factory* callable with signature ``() -> Simulation`` that
          builds a fresh simulation for each replication.

    until, ticks:
        Bounds forwarded to :meth:`Simulation.run`.

    number_runs:
        Number of independent replications to execute when a factory is used.
        If ``sim_or_factory`` is a concrete Simulation, this must be 1.

    **kwargs:
        Additional keyword arguments forwarded to :meth:`Simulation.run`.

    Returns
    -------
    Simulation or list[Simulation]
        - A single Simulation when given one.
        - A list of Simulations when a factory is used.
    """
    # --- Case 1: a concrete Simulation ---------------------------------------
    if isinstance(sim_or_factory, Simulation):
        if number_runs != 1:
            raise ValueError("number_runs > 1 requires a simulation *factory*; " "you passed a concrete Simulation instance.")

        sim_or_factory.run(until=until, ticks=ticks, num_runs=number_runs, **kwargs)
        return sim_or_factory

    # --- Case 2: a factory callable ------------------------------------------
    if not callable(sim_or_factory):
        raise TypeError("First argument to admitsim.run must be either a Simulation " "or a factory callable () -> Simulation.")

    if number_runs < 1:
        raise ValueError("number_runs must be >= 1")

    factory: Callable[[], Simulation] = sim_or_factory
    all_sims: List[Simulation] = []

    for i in range(number_runs):
        sim = factory()
        if not isinstance(sim, Simulation):
            raise TypeError(f"factory() must return admitsim.simulation.Simulation, " f"got {type(sim)!r} on run {i + 1}.")

        # Replication index doubles as the run id
        sim.env.run_number = i

        sim.run(until=until, ticks=ticks, num_runs=number_runs, **kwargs)
        all_sims.append(sim)

    return all_sims
