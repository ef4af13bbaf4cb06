import itertools
import json
import unittest

from app import app as flask_app
import app as app_mod
from game import GameStore


def _cells(state):
    out = {}
    for card in state["cards"]:
        out.setdefault(card["symbol"], []).append([card["position"]["row"], card["position"]["col"]])
    return out


class TestFlaskAPI(unittest.TestCase):
    def setUp(self):
        # Swap the module-level store so every test starts empty with predictable ids
        self._orig_store = app_mod.store
        counter = itertools.count(1)
        app_mod.store = GameStore(id_factory=lambda: f"game{next(counter)}")
        self.client = flask_app.test_client()

    def tearDown(self):
        app_mod.store = self._orig_store

    def _post(self, url, payload=None):
        return self.client.post(url, data=json.dumps(payload or {}), content_type="application/json")

    def _new(self, rows=4, cols=4, seed=123):
        r = self._post("/api/game/new", {"rows": rows, "cols": cols, "seed": seed})
        self.assertEqual(r.status_code, 200)
        return r.get_json()

    def test_given_index_when_requested_then_endpoint_list(self):
        r = self.client.get("/")
        self.assertEqual(r.status_code, 200)
        self.assertIn("POST /api/game/new", r.get_json()["endpoints"])

    def test_given_new_game_when_posted_then_id_and_state(self):
        data = self._new()
        self.assertTrue(data["ok"])
        self.assertEqual(data["gameId"], "game1")
        self.assertEqual(len(data["state"]["cards"]), 16)
        self.assertEqual(data["state"]["phase"], "playing")

        r = self.client.get("/api/game/game1/state")
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.get_json()["state"]["moves"], 0)

    def test_given_odd_or_oversized_grid_when_new_then_400(self):
        r = self._post("/api/game/new", {"rows": 3, "cols": 3})
        self.assertEqual(r.status_code, 400)
        self.assertEqual(r.get_json()["error"], "InvalidDimensions")

        r2 = self._post("/api/game/new", {"rows": 8, "cols": 8})
        self.assertEqual(r2.status_code, 400)
        self.assertEqual(r2.get_json()["error"], "BadRequest")

        r3 = self._post("/api/game/new", {"rows": "four"})
        self.assertEqual(r3.status_code, 400)

        r4 = self._post("/api/game/new", {"seed": "abc"})
        self.assertEqual(r4.status_code, 400)

    def test_given_unknown_game_when_requested_then_404(self):
        for url in ["/api/game/nope/state", "/api/game/nope/hint", "/api/game/nope/analysis", "/api/game/nope/highscores"]:
            r = self.client.get(url)
            self.assertEqual(r.status_code, 404)
            self.assertEqual(r.get_json()["error"], "GameNotFound")
        self.assertEqual(self._post("/api/game/nope/flip", {"row": 0, "col": 0}).status_code, 404)
        self.assertEqual(self._post("/api/game/nope/undo").status_code, 404)
        self.assertEqual(self._post("/api/game/nope/flipback").status_code, 404)

    def test_given_bad_flip_when_posted_then_error_kind(self):
        gid = self._new()["gameId"]
        r = self._post(f"/api/game/{gid}/flip", {"row": 9, "col": 0})
        self.assertEqual(r.status_code, 400)
        self.assertEqual(r.get_json()["error"], "OutOfBounds")

        r2 = self._post(f"/api/game/{gid}/flip", {"row": "x"})
        self.assertEqual(r2.status_code, 400)
        self.assertEqual(r2.get_json()["error"], "BadRequest")

        self._post(f"/api/game/{gid}/flip", {"row": 0, "col": 0})
        r3 = self._post(f"/api/game/{gid}/flip", {"row": 0, "col": 0})
        self.assertEqual(r3.get_json()["error"], "AlreadyFlipped")

    def test_given_mismatch_when_flip_back_then_cards_down(self):
        data = self._new()
        gid = data["gameId"]
        cells = list(_cells(data["state"]).values())
        a, b = cells[0][0], cells[1][0]
        self._post(f"/api/game/{gid}/flip", {"row": a[0], "col": a[1]})
        r = self._post(f"/api/game/{gid}/flip", {"row": b[0], "col": b[1]})
        d = r.get_json()
        self.assertTrue(d["ok"])
        self.assertEqual(d["state"]["pending"], 2)
        self.assertIn("card", d)

        r2 = self._post(f"/api/game/{gid}/flipback")
        d2 = r2.get_json()
        self.assertTrue(d2["ok"])
        self.assertEqual(d2["state"]["pending"], 0)
        self.assertEqual(d2["state"]["moves"], 2)

        r3 = self._post(f"/api/game/{gid}/flipback")
        self.assertEqual(r3.status_code, 400)
        self.assertEqual(r3.get_json()["error"], "NoPendingPair")

    def test_given_flip_when_undo_then_moves_restored(self):
        gid = self._new()["gameId"]
        r0 = self._post(f"/api/game/{gid}/undo")
        self.assertEqual(r0.get_json()["error"], "NoMoveToUndo")
        self._post(f"/api/game/{gid}/flip", {"row": 1, "col": 1})
        d = self._post(f"/api/game/{gid}/undo").get_json()
        self.assertTrue(d["ok"])
        self.assertEqual(d["state"]["moves"], 0)

    def test_given_game_when_cleared_then_won_and_high_score(self):
        data = self._new(rows=2, cols=2, seed=3)
        gid = data["gameId"]
        for a, b in _cells(data["state"]).values():
            self._post(f"/api/game/{gid}/flip", {"row": a[0], "col": a[1]})
            last = self._post(f"/api/game/{gid}/flip", {"row": b[0], "col": b[1]}).get_json()
        self.assertEqual(last["state"]["phase"], "won")
        scores = self.client.get(f"/api/game/{gid}/highscores").get_json()["highScores"]
        self.assertEqual(len(scores), 1)
        self.assertEqual(scores[0]["score"], last["state"]["score"])
        self.assertGreaterEqual(scores[0]["score"], 20)
        self.assertEqual(self.client.get(f"/api/game/{gid}/highscores?limit=0").get_json()["highScores"], [])
        self.assertEqual(self.client.get(f"/api/game/{gid}/highscores?limit=x").status_code, 400)

        r = self._post(f"/api/game/{gid}/undo")
        self.assertEqual(r.status_code, 400)
        self.assertEqual(r.get_json()["error"], "GameOver")
        self.assertEqual(self.client.get(f"/api/game/{gid}/state").get_json()["state"]["moves"], last["state"]["moves"])

    def test_given_non_integer_numbers_when_posted_then_bad_request_and_no_flip(self):
        gid = self._new()["gameId"]
        r = self._post(f"/api/game/{gid}/flip", {"row": 0.9, "col": 0})
        self.assertEqual(r.status_code, 400)
        self.assertEqual(r.get_json()["error"], "BadRequest")
        r2 = self._post(f"/api/game/{gid}/flip", {"row": "0", "col": "0"})
        self.assertEqual(r2.status_code, 400)
        state = self.client.get(f"/api/game/{gid}/state").get_json()["state"]
        self.assertEqual(state["moves"], 0)

        r3 = self._post("/api/game/new", {"rows": 2.5, "cols": 2})
        self.assertEqual(r3.status_code, 400)
        self.assertEqual(r3.get_json()["error"], "BadRequest")

    def test_given_game_when_hint_then_two_cells_with_same_symbol(self):
        data = self._new()
        gid = data["gameId"]
        hint = self.client.get(f"/api/game/{gid}/hint").get_json()["hint"]
        self.assertEqual(len(hint["cards"]), 2)
        expected = sorted(_cells(data["state"])[hint["symbol"]])
        self.assertEqual(sorted([c["row"], c["col"]] for c in hint["cards"]), expected)

    def test_given_game_when_analysis_then_single_component(self):
        gid = self._new()["gameId"]
        a = self.client.get(f"/api/game/{gid}/analysis").get_json()["analysis"]
        self.assertEqual(a["graph"]["connected_components"], 1)
        self.assertEqual(a["connectivity"]["sizes"], [16])
        self.assertEqual(a["index"]["table_size"], 53)

    def test_given_cells_when_path_then_manhattan_length(self):
        gid = self._new()["gameId"]
        r = self.client.get(f"/api/game/{gid}/path?from=0,0&to=3,2")
        d = r.get_json()
        self.assertEqual(r.status_code, 200)
        self.assertEqual(d["steps"], 5)
        self.assertEqual(d["path"][0], {"row": 0, "col": 0})
        self.assertEqual(d["path"][-1], {"row": 3, "col": 2})

        self.assertEqual(self.client.get(f"/api/game/{gid}/path?from=0,0").status_code, 400)
        self.assertEqual(self.client.get(f"/api/game/{gid}/path?from=0,0&to=7,7").status_code, 404)


if __name__ == "__main__":
    unittest.main(verbosity=2)
