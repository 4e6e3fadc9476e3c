import random


class RandomSource:
    """
    Anything with a random() method returning a float in [0, 1).
    random.Random satisfies this; so does SequenceRandom.
    """

    def random(self):
        raise NotImplementedError


class SequenceRandom(RandomSource):
    """
    Replays a fixed sequence of floats, cycling when exhausted.
    """

    def __init__(self, values):
        values = [float(v) for v in values]
        if not values:
            raise ValueError("SequenceRandom needs at least one value")
        for v in values:
            if not 0.0 <= v < 1.0:
                raise ValueError(f"value out of range [0, 1): {v}")
        self.values = values
        self.calls = 0

    def random(self):
        value = self.values[self.calls % len(self.values)]
        self.calls += 1
        return value


def ensure_rng(rng):
    # A private generator per call keeps concurrent callers independent.
    return rng if rng is not None else random.Random()


def uniform(rng, lo, hi):
    if lo > hi:
        lo, hi = hi, lo
    return lo + rng.random() * (hi - lo)


def choice(rng, items):
    items = list(items)
    if not items:
        raise IndexError("cannot choose from an empty sequence")
    index = min(int(rng.random() * len(items)), len(items) - 1)
    return items[index]
