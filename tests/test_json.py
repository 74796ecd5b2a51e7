import os
import unittest

os.environ.setdefault("MONAD2048_LEDGER", "log")

from app import board_to_json, board_from_json, session_to_json, tile_to_json  # noqa: E402
from game import Board, GameSession, Tile  # noqa: E402


class TestJson(unittest.TestCase):
    def test_given_board_when_roundtrip_json_then_equal(self):
        board = Board.from_rows([
            [2, 4, 8, 16],
            [0, 0, 0, 0],
            [32, 0, 64, 0],
            [0, 0, 0, 2048],
        ])
        bj = board_to_json(board)
        self.assertEqual(len(bj["rows"]), 4)
        self.assertEqual(bj["rows"][3], [0, 0, 0, 2048])
        self.assertEqual(board_from_json(bj), board)

        back = board_from_json({"grid": list(board.grid)})
        self.assertEqual(back, board)

    def test_given_non_integer_cells_when_parsing_board_then_value_error(self):
        rest = [[0, 0, 0, 0]] * 3
        for bad in ("8", 2.9, 2.0, True, None):
            with self.assertRaises(ValueError):
                board_from_json({"rows": [[bad, 0, 0, 0]] + rest})
            with self.assertRaises(ValueError):
                board_from_json({"grid": [bad] + [0] * 15})
        with self.assertRaises(ValueError):
            board_from_json({"grid": "2000"})

    def test_given_malformed_board_json_when_parsing_then_value_error(self):
        for bad in (None, [], {}, {"rows": "x"}, {"rows": [[0] * 4] * 3}, {"grid": [0] * 15}, {"grid": [3] + [0] * 15}):
            with self.assertRaises(ValueError):
                board_from_json(bad)

    def test_given_session_when_to_json_then_fields_present(self):
        board = Board.from_rows([[2, 0, 0, 0], [4, 0, 0, 0], [0] * 4, [0] * 4])
        sj = session_to_json(GameSession.from_board(board, score=36))
        self.assertEqual(sj["score"], 36)
        self.assertEqual(sj["status"], "in_progress")
        self.assertEqual(sj["moves"], 0)
        self.assertEqual(sj["bestTile"], 4)
        self.assertEqual(sj["available"], ["down", "right"])
        self.assertEqual(sj["board"]["rows"][1], [4, 0, 0, 0])

    def test_given_tile_when_to_json_then_dict_or_none(self):
        self.assertEqual(tile_to_json(Tile(1, 2, 4)), {"row": 1, "col": 2, "value": 4})
        self.assertIsNone(tile_to_json(None))


if __name__ == '__main__':
    unittest.main(verbosity=2)
