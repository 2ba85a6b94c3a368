"""
Declarative function registry.

One row per host-facing function name: the engine function it binds to, the
argument counts the engine accepts and a short description. The rows are
turned into constructors once, when ``planframe.functions`` is imported, so
adding a function means adding a row here.

Arities are not checked when an expression is built. The engine adapter
checks them when it lowers a plan, because the engine owns the signatures.
"""

from typing import Dict, NamedTuple, Optional, Tuple

REGISTRY_VERSION = "1"


class FunctionSpec(NamedTuple):
    """
    One registry row.

    Attributes:
        name: Host-facing constructor name
        engine_name: Engine function identifier
        arity: (minimum, maximum) argument counts; maximum None is unbounded
        doc: One-line description used as the constructor docstring
    """

    name: str
    engine_name: str
    arity: Tuple[int, Optional[int]]
    doc: str = ""

    @property
    def variadic(self) -> bool:
        return self.arity[1] is None

    def accepts(self, count: int) -> bool:
        low, high = self.arity
        return count >= low and (high is None or count <= high)


_UNARY = (1, 1)
_BINARY = (2, 2)
_NULLARY = (0, 0)


def _rows(*specs: FunctionSpec) -> Dict[str, FunctionSpec]:
    table = {}
    for spec in specs:
        if spec.name in table:
            raise ValueError(f"Duplicate registry entry: {spec.name}")
        table[spec.name] = spec
    return table


# fmt: off
SCALAR_FUNCTIONS: Dict[str, FunctionSpec] = _rows(
    # Math
    FunctionSpec("abs", "abs", _UNARY, "Absolute value."),
    FunctionSpec("acos", "acos", _UNARY, "Arc cosine."),
    FunctionSpec("asin", "asin", _UNARY, "Arc sine."),
    FunctionSpec("atan", "atan", _UNARY, "Arc tangent."),
    FunctionSpec("atan2", "atan2", _BINARY, "Arc tangent of y / x."),
    FunctionSpec("cbrt", "cbrt", _UNARY, "Cube root."),
    FunctionSpec("ceil", "ceil", _UNARY, "Smallest integer not less than the argument."),
    FunctionSpec("cos", "cos", _UNARY, "Cosine."),
    FunctionSpec("cosh", "cosh", _UNARY, "Hyperbolic cosine."),
    FunctionSpec("cot", "cot", _UNARY, "Cotangent."),
    FunctionSpec("degrees", "degrees", _UNARY, "Converts radians to degrees."),
    FunctionSpec("exp", "exp", _UNARY, "Exponential."),
    FunctionSpec("factorial", "factorial", _UNARY, "Factorial."),
    FunctionSpec("floor", "floor", _UNARY, "Largest integer not greater than the argument."),
    FunctionSpec("gcd", "gcd", _BINARY, "Greatest common divisor."),
    FunctionSpec("isnan", "isnan", _UNARY, "True if the argument is NaN."),
    FunctionSpec("iszero", "iszero", _UNARY, "True if the argument is +0.0 or -0.0."),
    FunctionSpec("lcm", "lcm", _BINARY, "Least common multiple."),
    FunctionSpec("ln", "ln", _UNARY, "Natural logarithm."),
    FunctionSpec("log", "log", _BINARY, "Logarithm of the second argument in the base given first."),
    FunctionSpec("log10", "log10", _UNARY, "Base 10 logarithm."),
    FunctionSpec("log2", "log2", _UNARY, "Base 2 logarithm."),
    FunctionSpec("pi", "pi", _NULLARY, "The constant pi."),
    FunctionSpec("power", "power", _BINARY, "Base raised to the power of the exponent."),
    FunctionSpec("pow", "power", _BINARY, "Alias of power."),
    FunctionSpec("radians", "radians", _UNARY, "Converts degrees to radians."),
    FunctionSpec("random", "random", _NULLARY, "Random float in [0, 1)."),
    FunctionSpec("round", "round", (1, 2), "Rounds to the given number of decimal places."),
    FunctionSpec("signum", "signum", _UNARY, "Sign of the argument (-1, 0, +1)."),
    FunctionSpec("sin", "sin", _UNARY, "Sine."),
    FunctionSpec("sinh", "sinh", _UNARY, "Hyperbolic sine."),
    FunctionSpec("sqrt", "sqrt", _UNARY, "Square root."),
    FunctionSpec("tan", "tan", _UNARY, "Tangent."),
    FunctionSpec("tanh", "tanh", _UNARY, "Hyperbolic tangent."),
    FunctionSpec("trunc", "trunc", (1, 2), "Truncates toward zero, optionally to a precision."),
    # Strings
    FunctionSpec("ascii", "ascii", _UNARY, "Numeric code of the first character of the argument."),
    FunctionSpec("bit_length", "bit_length", _UNARY, "Number of bits in the string (8 times the octet_length)."),
    FunctionSpec("btrim", "btrim", _UNARY, "Removes spaces from both ends of the string."),
    FunctionSpec("character_length", "character_length", _UNARY, "Number of characters in the string."),
    FunctionSpec("length", "character_length", _UNARY, "Alias of character_length."),
    FunctionSpec("char_length", "character_length", _UNARY, "Alias of character_length."),
    FunctionSpec("chr", "chr", _UNARY, "Character with the given code."),
    FunctionSpec("concat", "concat", (0, None), "Concatenates the text of all arguments, ignoring NULLs."),
    FunctionSpec("concat_ws", "concat_ws", (1, None), "Concatenates all but the first argument with the first as separator, ignoring NULLs."),
    FunctionSpec("ends_with", "ends_with", _BINARY, "True if the string ends with the suffix."),
    FunctionSpec("initcap", "initcap", _UNARY, "Upper-cases the first letter of each word and lower-cases the rest."),
    FunctionSpec("left", "left", _BINARY, "First n characters, or all but the last |n| when n is negative."),
    FunctionSpec("levenshtein", "levenshtein", _BINARY, "Edit distance between two strings."),
    FunctionSpec("lower", "lower", _UNARY, "Converts the string to lower case."),
    FunctionSpec("lpad", "lpad", (2, 3), "Left-pads the string to a length with fill characters (space by default), truncating longer strings."),
    FunctionSpec("ltrim", "ltrim", _UNARY, "Removes spaces from the start of the string."),
    FunctionSpec("octet_length", "octet_length", _UNARY, "Number of bytes in the string."),
    FunctionSpec("regexp_match", "regexp_match", (2, 3), "Matches a POSIX regular expression and returns the captured groups."),
    FunctionSpec("regexp_replace", "regexp_replace", (3, 4), "Replaces substrings matching a POSIX regular expression."),
    FunctionSpec("repeat", "repeat", _BINARY, "Repeats the string n times."),
    FunctionSpec("replace", "replace", (3, 3), "Replaces every occurrence of a substring with another."),
    FunctionSpec("reverse", "reverse", _UNARY, "Reverses the characters of the string."),
    FunctionSpec("right", "right", _BINARY, "Last n characters, or all but the first |n| when n is negative."),
    FunctionSpec("rpad", "rpad", (2, 3), "Right-pads the string to a length with fill characters (space by default), truncating longer strings."),
    FunctionSpec("rtrim", "rtrim", _UNARY, "Removes spaces from the end of the string."),
    FunctionSpec("split_part", "split_part", (3, 3), "Splits on a delimiter and returns the n'th field, counting from one."),
    FunctionSpec("starts_with", "starts_with", _BINARY, "True if the string starts with the prefix."),
    FunctionSpec("strpos", "strpos", _BINARY, "1-based position of a substring, or zero when absent."),
    FunctionSpec("substr", "substr", _BINARY, "Substring from a 1-based position to the end."),
    FunctionSpec("substring", "substring", (3, 3), "Substring of a given length from a 1-based position."),
    FunctionSpec("to_hex", "to_hex", _UNARY, "Hexadecimal representation of a number."),
    FunctionSpec("translate", "translate", (3, 3), "Replaces characters found in one set with the matching character of another."),
    FunctionSpec("trim", "trim", _UNARY, "Removes spaces from both ends of the string."),
    FunctionSpec("upper", "upper", _UNARY, "Converts the string to upper case."),
    FunctionSpec("uuid", "uuid", _NULLARY, "Random version 4 UUID string."),
    # Hashing
    FunctionSpec("digest", "digest", _BINARY, "Binary hash of the first argument with the algorithm named by the second."),
    FunctionSpec("md5", "md5", _UNARY, "MD5 hash of the argument as hexadecimal."),
    FunctionSpec("sha224", "sha224", _UNARY, "SHA-224 hash of the argument."),
    FunctionSpec("sha256", "sha256", _UNARY, "SHA-256 hash of the argument."),
    FunctionSpec("sha384", "sha384", _UNARY, "SHA-384 hash of the argument."),
    FunctionSpec("sha512", "sha512", _UNARY, "SHA-512 hash of the argument."),
    # Date and time
    FunctionSpec("current_date", "current_date", _NULLARY, "Current UTC date."),
    FunctionSpec("current_time", "current_time", _NULLARY, "Current UTC time."),
    FunctionSpec("date_bin", "date_bin", (3, 3), "Bins timestamps into intervals of a given stride from an origin."),
    FunctionSpec("date_part", "date_part", _BINARY, "Extracts a field (year, month, ...) from a date or timestamp."),
    FunctionSpec("datepart", "date_part", _BINARY, "Alias of date_part."),
    FunctionSpec("date_trunc", "date_trunc", _BINARY, "Truncates a timestamp to the given precision."),
    FunctionSpec("datetrunc", "date_trunc", _BINARY, "Alias of date_trunc."),
    FunctionSpec("from_unixtime", "from_unixtime", _UNARY, "Timestamp from seconds since the Unix epoch."),
    FunctionSpec("now", "now", _NULLARY, "Timestamp at the start of the query."),
    FunctionSpec("to_timestamp", "to_timestamp", (1, None), "Converts to a nanosecond timestamp, trying each format argument in turn."),
    FunctionSpec("to_timestamp_micros", "to_timestamp_micros", (1, None), "Converts to a microsecond timestamp."),
    FunctionSpec("to_timestamp_millis", "to_timestamp_millis", (1, None), "Converts to a millisecond timestamp."),
    FunctionSpec("to_timestamp_seconds", "to_timestamp_seconds", (1, None), "Converts to a second timestamp."),
    # Conditional, arrays, types
    FunctionSpec("coalesce", "coalesce", (1, None), "First non-null argument."),
    FunctionSpec("nullif", "nullif", _BINARY, "NULL if both arguments are equal, else the first."),
    FunctionSpec("make_array", "make_array", (0, None), "Array of the arguments."),
    FunctionSpec("array", "make_array", (0, None), "Alias of make_array."),
    FunctionSpec("arrow_typeof", "arrow_typeof", _UNARY, "Arrow data type of the argument."),
)

AGGREGATE_FUNCTIONS: Dict[str, FunctionSpec] = _rows(
    FunctionSpec("approx_distinct", "approx_distinct", _UNARY, "Approximate number of distinct values."),
    FunctionSpec("array_agg", "array_agg", _UNARY, "Collects the values into an array."),
    FunctionSpec("avg", "avg", _UNARY, "Arithmetic mean."),
    FunctionSpec("count", "count", (0, 1), "Number of non-null values, or of rows when called without arguments."),
    FunctionSpec("max", "max", _UNARY, "Maximum value."),
    FunctionSpec("median", "median", _UNARY, "Median value."),
    FunctionSpec("min", "min", _UNARY, "Minimum value."),
    FunctionSpec("stddev", "stddev", _UNARY, "Sample standard deviation."),
    FunctionSpec("sum", "sum", _UNARY, "Sum of the values."),
    FunctionSpec("var", "var_samp", _UNARY, "Sample variance."),
)

_RANKING_WINDOW_FUNCTIONS = _rows(
    FunctionSpec("row_number", "row_number", _NULLARY, "Sequential row number from 1 within the partition."),
    FunctionSpec("rank", "rank", _NULLARY, "Rank with gaps for ties."),
    FunctionSpec("dense_rank", "dense_rank", _NULLARY, "Rank without gaps for ties."),
    FunctionSpec("percent_rank", "percent_rank", _NULLARY, "Relative rank, (rank - 1) / (rows - 1)."),
    FunctionSpec("cume_dist", "cume_dist", _NULLARY, "Cumulative distribution of the row within the partition."),
    FunctionSpec("ntile", "ntile", _UNARY, "Bucket number from 1 to n."),
    FunctionSpec("lag", "lag", (1, 3), "Value from an earlier row of the partition."),
    FunctionSpec("lead", "lead", (1, 3), "Value from a later row of the partition."),
    FunctionSpec("first_value", "first_value", _UNARY, "First value in the frame."),
    FunctionSpec("last_value", "last_value", _UNARY, "Last value in the frame."),
    FunctionSpec("nth_value", "nth_value", _BINARY, "n'th value in the frame."),
)
# fmt: on

# Every aggregate is also usable as a window function.
WINDOW_FUNCTIONS: Dict[str, FunctionSpec] = {
    **_RANKING_WINDOW_FUNCTIONS,
    **AGGREGATE_FUNCTIONS,
}

DIGEST_ALGORITHMS = (
    "md5",
    "sha224",
    "sha256",
    "sha384",
    "sha512",
    "blake2s",
    "blake2b",
    "blake3",
)


def find_window_function(name: str) -> Optional[FunctionSpec]:
    """Look up a window function by name, ignoring case like SQL does."""
    if not isinstance(name, str):
        return None
    return WINDOW_FUNCTIONS.get(name.lower())


def lookup(name: str) -> Optional[FunctionSpec]:
    """Find a scalar or aggregate registry row by host-facing name."""
    return SCALAR_FUNCTIONS.get(name) or AGGREGATE_FUNCTIONS.get(name)
