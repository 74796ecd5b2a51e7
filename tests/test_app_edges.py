import os
import json
import unittest

os.environ.setdefault("MONAD2048_LEDGER", "log")

from app import app as flask_app  # noqa: E402
import app as app_mod             # noqa: E402
from game import Board, GameSession, seeded_source  # noqa: E402


def _post(client, url, payload):
    return client.post(url, data=json.dumps(payload), content_type="application/json")


def _register(board, score=0, rng=None):
    rng = rng or seeded_source(0)
    return app_mod.registry.create(lambda: GameSession.from_board(board, score=score, rng=rng))


NEARLY_OVER = Board.from_rows([
    [2, 4, 2, 4],
    [4, 2, 4, 2],
    [2, 4, 2, 4],
    [4, 2, 8, 8],
])


class TestFlaskAPIEdges(unittest.TestCase):
    def setUp(self):
        self.client = flask_app.test_client()

    def test_given_no_op_move_when_posted_then_not_committed_and_state_unchanged(self):
        board = Board.from_rows([[2, 0, 0, 0], [4, 0, 0, 0], [0] * 4, [0] * 4])
        sid = _register(board, score=8)
        r = _post(self.client, "/api/move", {"sessionId": sid, "direction": "left"})
        self.assertEqual(r.status_code, 200)
        d = r.get_json()
        self.assertTrue(d["ok"])
        self.assertFalse(d["committed"])
        self.assertEqual(d["scoreDelta"], 0)
        self.assertIsNone(d["spawned"])
        self.assertEqual(d["state"]["board"]["rows"], board.rows())
        self.assertEqual(d["state"]["score"], 8)
        self.assertEqual(d["state"]["moves"], 0)

    def test_given_final_merge_when_moving_then_terminal_and_next_move_409(self):
        sid = _register(NEARLY_OVER, rng=lambda: 0.0)
        r = _post(self.client, "/api/move", {"sessionId": sid, "direction": "left"})
        self.assertEqual(r.status_code, 200)
        d = r.get_json()
        self.assertTrue(d["committed"])
        self.assertTrue(d["isTerminal"])
        self.assertEqual(d["scoreDelta"], 16)
        self.assertEqual(d["state"]["status"], "terminal")
        self.assertEqual(d["state"]["available"], [])

        r2 = _post(self.client, "/api/move", {"sessionId": sid, "direction": "right"})
        self.assertEqual(r2.status_code, 409)
        d2 = r2.get_json()
        self.assertFalse(d2["ok"])
        self.assertTrue(d2["gameOver"])

    def test_given_bad_direction_when_move_then_400(self):
        sid = _register(NEARLY_OVER)
        for bad in ("north", None, 5):
            r = _post(self.client, "/api/move", {"sessionId": sid, "direction": bad})
            self.assertEqual(r.status_code, 400)
            self.assertFalse(r.get_json()["ok"])
        self.assertEqual(app_mod.registry.get(sid).move_count, 0)

    def test_given_missing_or_unknown_session_when_called_then_400_or_404(self):
        r = _post(self.client, "/api/move", {"direction": "left"})
        self.assertEqual(r.status_code, 400)
        r = _post(self.client, "/api/move", {"sessionId": "nope", "direction": "left"})
        self.assertEqual(r.status_code, 404)
        r = _post(self.client, "/api/legal", {"sessionId": "nope"})
        self.assertEqual(r.status_code, 404)
        r = self.client.get("/api/session/nope")
        self.assertEqual(r.status_code, 404)

    def test_given_bad_seed_when_new_then_400(self):
        for bad in ("abc", 1.5, True):
            r = _post(self.client, "/api/new", {"seed": bad})
            self.assertEqual(r.status_code, 400)

    def test_given_non_object_body_when_posted_then_400(self):
        for url in ("/api/new", "/api/move", "/api/legal", "/api/slide"):
            for body in ([1, 2], "left", 3):
                r = _post(self.client, url, body)
                self.assertEqual(r.status_code, 400, url)
                self.assertFalse(r.get_json()["ok"])

    def test_given_float_cell_when_slide_then_400_not_truncated(self):
        board = {"rows": [[2.9, 0, 0, 0], [0] * 4, [0] * 4, [0] * 4]}
        r = _post(self.client, "/api/slide", {"board": board, "direction": "left"})
        self.assertEqual(r.status_code, 400)
        self.assertIn("integers", r.get_json()["error"])

    def test_given_malformed_board_when_slide_then_400(self):
        bad_boards = [
            None,
            {"grid": [0] * 15},
            {"rows": [[3, 0, 0, 0], [0] * 4, [0] * 4, [0] * 4]},
            {"grid": [None] * 16},
        ]
        for b in bad_boards:
            r = _post(self.client, "/api/slide", {"board": b, "direction": "left"})
            self.assertEqual(r.status_code, 400)
            self.assertIn("bad request", r.get_json()["error"])
        r = _post(self.client, "/api/slide", {"board": {"grid": [0] * 16}, "direction": "sideways"})
        self.assertEqual(r.status_code, 400)

    def test_given_terminal_board_when_slide_then_unchanged(self):
        board = Board.from_rows([[2, 4, 2, 4], [4, 2, 4, 2]] * 2)
        for direction in ("up", "down", "left", "right"):
            r = _post(self.client, "/api/slide", {"board": {"grid": list(board.grid)}, "direction": direction})
            d = r.get_json()
            self.assertFalse(d["changed"])
            self.assertEqual(d["scoreDelta"], 0)
            self.assertEqual(d["board"]["rows"], board.rows())


if __name__ == "__main__":
    unittest.main(verbosity=2)
