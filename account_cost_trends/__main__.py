import sys

from account_cost_trends.analyze import main

if __name__ == "__main__":
    sys.exit(main())
