"""
Return-rate sources for the projection loop.

A source is anything with `rate_for(index, age, is_retired)` returning the
nominal growth rate (decimal) applied to every bucket in that year.
"""
import numpy as np


class FixedReturns:
    """One rate while working, another once retired."""

    def __init__(self, pre_retirement, post_retirement):
        self.pre_retirement = pre_retirement
        self.post_retirement = post_retirement

    @classmethod
    def from_inputs(cls, inputs):
        return cls(inputs.pre_retirement_return / 100, inputs.post_retirement_return / 100)

    def rate_for(self, index, age, is_retired):
        return self.post_retirement if is_retired else self.pre_retirement


class ReturnSeries:
    """
    Explicit year-by-year rates (decimals), e.g. a historical sequence.
    Runs past the end of the series repeat the last rate.
    """

    def __init__(self, rates):
        self.rates = np.asarray(rates, dtype=float)
        if self.rates.ndim != 1 or self.rates.size == 0:
            raise ValueError("ReturnSeries needs a non-empty 1-D sequence of rates")

    def rate_for(self, index, age, is_retired):
        index = min(max(index, 0), self.rates.size - 1)
        return float(self.rates[index])
