import click

from stats_simulator.simulation.params import parse_positive_int, parse_probability


class Probability(click.ParamType):
    """
    A custom Click parameter type for a probability of success.

    Accepts numbers in [0, 1], tolerating tiny round-trip errors from text
    input, and clamps them into the interval.
    """

    name = "probability"

    def convert(self, value, param, ctx):
        if value is None:
            return None
        probability = parse_probability(value)
        if probability is None:
            self.fail(
                f"'{value}' is not a probability between 0.0 and 1.0.", param, ctx
            )
        return probability


class PositiveInt(click.ParamType):
    """A Click parameter type for strictly positive integers."""

    name = "positive-int"

    def convert(self, value, param, ctx):
        if value is None:
            return None
        number = parse_positive_int(value)
        if number is None:
            self.fail(f"'{value}' is not a positive integer.", param, ctx)
        return number
