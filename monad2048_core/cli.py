from __future__ import annotations

import argparse
import logging
from typing import List, Optional

from .direction import Direction
from .ledger import LedgerForwarder, LoggingLedgerClient
from .session import GameSession
from .spawn import seeded_source

# WASD keys, used interactively and for scripted runs written in WASD.
_KEYS = {'w': Direction.UP, 'a': Direction.LEFT, 's': Direction.DOWN, 'd': Direction.RIGHT}


def parse_moves(text: str) -> List[Direction]:
    """
    Parses a scripted move sequence: comma/space separated names
    ('left,up,right') or compact letter runs. A run made only of w/a/s/d
    that uses at least one of w, a or s is read as WASD ('wasd', 'dds');
    any other run uses u/d/l/r ('lldru'), so a lone 'd' means down.
    """
    names = {d.value for d in Direction}
    moves: List[Direction] = []
    for token in text.replace(',', ' ').split():
        lowered = token.lower()
        if lowered in names:
            moves.append(Direction.parse(token))
        elif set(lowered) <= set(_KEYS) and set(lowered) & set('was'):
            moves.extend(_KEYS[ch] for ch in lowered)
        else:
            moves.extend(Direction.parse(ch) for ch in token)
    return moves


def _print_state(session: GameSession) -> None:
    print(session.board.pretty())
    print(f'Score: {session.score}')


def _play_scripted(session: GameSession, moves: List[Direction]) -> None:
    for direction in moves:
        if session.is_terminal:
            print('Game already over; ignoring remaining moves.')
            break
        outcome = session.apply_move(direction)
        if not outcome.committed:
            print(f'{direction.value}: nothing moved')
    _print_state(session)
    if session.is_terminal:
        print('Game over')


def _play_interactive(session: GameSession) -> None:
    _print_state(session)
    while not session.is_terminal:
        text = input('Move (w/a/s/d, or up/down/left/right; q quits): ').strip().lower()
        if text == 'q':
            print('Thanks for playing!')
            return
        try:
            direction = _KEYS[text] if text in _KEYS else Direction.parse(text)
        except ValueError:
            print('Could not parse. Try again.')
            continue
        outcome = session.apply_move(direction)
        if not outcome.committed:
            print('Nothing moved. Try another direction.')
            continue
        _print_state(session)
    print(f'Game over. Final score: {session.score}')


def main(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser(description='Monad 2048 tile-merging puzzle')
    parser.add_argument('--seed', type=int, default=None, help='RNG seed for tile spawns')
    parser.add_argument('--moves', default=None, help="Scripted moves, e.g. 'llur', 'wasd' or 'left,up'")
    parser.add_argument('--play', action='store_true', help='Play interactively')
    parser.add_argument('--ledger', choices=['off', 'log'], default='off', help='Forward moves to a logging ledger')
    parser.add_argument('--verbose', action='store_true', help='Enable debug logging')
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    )

    session = GameSession(rng=seeded_source(args.seed) if args.seed is not None else None)
    forwarder: Optional[LedgerForwarder] = None
    if args.ledger == 'log':
        forwarder = LedgerForwarder(LoggingLedgerClient())
        session.add_listener(forwarder)
    session.start()

    try:
        if args.moves is not None:
            try:
                moves = parse_moves(args.moves)
            except ValueError as e:
                parser.error(str(e))
            _play_scripted(session, moves)
        elif args.play:
            _play_interactive(session)
        else:
            print('Initial board:')
            _print_state(session)
            print('Available moves:', ', '.join(d.value for d in session.available_directions()))
    finally:
        if forwarder is not None:
            forwarder.flush()
            forwarder.close()


if __name__ == '__main__':
    main()
