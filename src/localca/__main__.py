# localca/__main__.py

from localca.cli import main

if __name__ == "__main__":
    raise SystemExit(main())
