from arith.parser import ParserError, parse
from arith.runtime import evaluate
from arith.tokenizer import TokenizerError, tokenize

for code in [
    "5",
    "-1",
    "1+1",
    "-1+1",
    "1+-1",
    "4+6*3",
    "(4+6)",
    "(4+6)*3",
    "(4+6)(3)",
    "7/6/2000",
    "5^2",
    "2^3^2",
    "-2^2",
    "1+14*(54^2)",
    "10/5/2",
    "5/0",
    "2(3)",
    "(1+2",
    "(1+2))",
]:
    print("=" * 10)
    print(f"code: {code!r}")
    try:
        tokens = tokenize(code)
    except TokenizerError as e:
        print(e)
        continue

    print(f"tokens: {' '.join(str(t) for t in tokens)}")

    try:
        expression = parse(code)
    except ParserError as e:
        print(e)
        continue
    print(f"ast: {expression}")
    print(f"result: {evaluate(expression)}")
