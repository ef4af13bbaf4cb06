from collections import defaultdict


class FakeClock:
    def __init__(self, start=100.0):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


def cells_by_symbol(game):
    """symbol -> [(row, col), (row, col)] in card order."""
    out = defaultdict(list)
    for card in game.cards:
        out[card.symbol].append((card.position.row, card.position.col))
    return dict(out)


def mismatched_cells(game):
    """Two cells holding different symbols."""
    first = game.cards[0]
    for card in game.cards[1:]:
        if card.symbol != first.symbol:
            return tuple(first.position), tuple(card.position)
    raise AssertionError("board has a single symbol")
