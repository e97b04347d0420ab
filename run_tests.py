import sys
import pathlib
import pytest


if __name__ == "__main__":
    root = pathlib.Path(__file__).parent

    args = [str(root / "tests")] + sys.argv[1:]

    exit_code = pytest.main(args)
    sys.exit(exit_code)
