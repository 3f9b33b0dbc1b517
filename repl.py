import argparse
import logging

from arith.runtime import evaluate_expression
from arith.utils import EvaluationError


if __name__ == "__main__":
    arg_parser = argparse.ArgumentParser(description="Arithmetic expression evaluator")
    arg_parser.add_argument(
        "--right-assoc-power",
        action="store_true",
        help="evaluate 2^3^2 as 2^(3^2) instead of (2^3)^2",
    )
    arg_parser.add_argument("--debug", action="store_true", help="log each evaluated input and its result")
    args = arg_parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    print("Arithmetic expression evaluator.")
    print("Supported: numbers like 2 or 34.4, + - * / ^, unary minus and brackets, e.g. 2*3+(4-5)+2^3/4")

    while True:
        try:
            code = input("> ")
        except (EOFError, KeyboardInterrupt):
            print()
            break

        try:
            result = evaluate_expression(code, right_associative_power=args.right_assoc_power)
        except EvaluationError as e:
            print(e)
            print("Invalid expression, please try again")
            continue

        print(result)
