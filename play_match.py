#!/usr/bin/env python3
"""
Neural Hand Match Player

Plays rock-paper-scissors against the Neural Hand from the terminal,
either interactively (keys 1/2/3) or against a scripted opponent.
"""

import os
import random
from typing import Dict, List, Optional

from neural_hand import PredictionService
from opponents import OPPONENTS, Strategy, new_opponent_state
from rps_moves import MOVES, get_winner

KEYS = {'1': 'rock', '2': 'paper', '3': 'scissors'}


def _default_seed() -> Optional[int]:
    raw = os.environ.get("NEURAL_HAND_SEED", "")
    return int(raw) if raw else None


def simulate_match(service: PredictionService, strategy: Strategy, rounds: int = 99,
                   rng: Optional[random.Random] = None) -> Dict:
    """Play `rounds` rounds of `strategy` against `service` and tally the result."""
    opp_state = new_opponent_state(rng)
    wins, losses, ties = 0, 0, 0
    outcomes: List[str] = []

    for r in range(rounds):
        our_move = service.predict_counter_move()
        opp_move = strategy(opp_state, r)

        winner = get_winner(our_move, opp_move)
        if winner == "tie":
            ties += 1
        elif winner == "you":
            wins += 1
        else:
            losses += 1
        outcomes.append(winner)

        # Update opponent state
        opp_state["won_last"] = winner == "opponent"
        opp_state["last_move"] = opp_move
        opp_state["my_history"].append(our_move)

        service.record_move_and_train(opp_move)

    return {
        "wins": wins,
        "losses": losses,
        "ties": ties,
        "win_rate": wins / (wins + losses) if (wins + losses) > 0 else 0,
        "outcomes": outcomes,
    }


def run_local_test(service: PredictionService, opponent_type: str = "random", rounds: int = 99,
                   seed: Optional[int] = None) -> Dict:
    """Run a local test match against a simulated opponent."""
    print(f"\nLocal Test: Neural Hand vs {opponent_type} ({rounds} rounds)", flush=True)
    print("=" * 50, flush=True)

    result = simulate_match(service, OPPONENTS[opponent_type], rounds, random.Random(seed))

    wins = losses = ties = 0
    for r, winner in enumerate(result["outcomes"]):
        wins += winner == "you"
        losses += winner == "opponent"
        ties += winner == "tie"
        if (r + 1) % 20 == 0:
            wr = wins / (wins + losses) if (wins + losses) > 0 else 0
            print(f"Round {r+1}: {wins}W-{losses}L-{ties}T (WR: {wr:.1%})", flush=True)

    print("\n" + "=" * 50, flush=True)
    print(f"Final: {result['wins']}W - {result['losses']}L - {result['ties']}T", flush=True)
    print(f"Win Rate: {result['win_rate']:.1%}", flush=True)
    print(f"Training steps: {service.training_steps} (skipped: {service.skipped_steps})", flush=True)
    print("=" * 50, flush=True)

    result["opponent"] = opponent_type
    return result


def _format_confidence(confidence: List[float]) -> str:
    return "  ".join(f"{m}={p:.1%}" for m, p in zip(MOVES, confidence))


def _rate(count: int, total: int) -> str:
    return f"{count / total:.1%}" if total else "0.0%"


def play_interactive(service: PredictionService, forget_on_reset: bool = False) -> Dict:
    """Keyboard game loop: 1/2/3 to play, c for confidence, r for a new game, q to quit."""
    player_score, ai_score, ties, round_count = 0, 0, 0, 0

    print("Keys: 1=rock 2=paper 3=scissors  c=confidence  r=new game  q=quit", flush=True)
    while True:
        try:
            key = input("> ").strip().lower()
        except EOFError:
            break

        if key == 'q':
            break
        if key == 'c':
            stats = service.stats()
            counts = "  ".join(f"{m}={n}" for m, n in stats["move_counts"].items())
            print(f"Confidence: {_format_confidence(stats['confidence'])}", flush=True)
            print(f"Your moves: {counts} (trained: {stats['trained']})", flush=True)
            continue
        if key == 'r':
            player_score, ai_score, ties, round_count = 0, 0, 0, 0
            if forget_on_reset:
                service.reset()
            print(f"New game. Model history: {service.get_history_length()} moves", flush=True)
            continue
        if key not in KEYS:
            print("Unknown key", flush=True)
            continue

        player_move = KEYS[key]
        ai_move = service.predict_counter_move()
        confidence = service.get_confidence()

        winner = get_winner(player_move, ai_move)
        round_count += 1
        if winner == "you":
            player_score += 1
        elif winner == "opponent":
            ai_score += 1
        else:
            ties += 1

        service.record_move_and_train(player_move)

        print(f"Round {round_count}: you {player_move} vs AI {ai_move} -> {winner.upper()} | "
              f"Score {player_score}-{ai_score} | {_format_confidence(confidence)}", flush=True)

    print(f"Final Score: {player_score} - {ai_score} over {round_count} rounds", flush=True)
    print(f"You {_rate(player_score, round_count)} | AI {_rate(ai_score, round_count)} | "
          f"Ties {_rate(ties, round_count)}", flush=True)

    return {
        "player_score": player_score,
        "ai_score": ai_score,
        "ties": ties,
        "rounds": round_count,
    }


def main():
    import argparse

    parser = argparse.ArgumentParser(description="Neural Hand Match Player")
    parser.add_argument("--test", action="store_true", help="Run local test against a scripted opponent")
    parser.add_argument("--opponent", default="random", choices=sorted(OPPONENTS),
                        help="Test opponent type")
    parser.add_argument("--rounds", type=int, default=99, help="Test rounds")
    parser.add_argument("--seed", type=int, default=_default_seed(),
                        help="Seed for weights and random moves (default: $NEURAL_HAND_SEED)")
    parser.add_argument("--forget-on-reset", action="store_true",
                        help="Make 'r' also clear the model's history and weights")
    parser.add_argument("--verbose", action="store_true", help="Print model diagnostics")

    args = parser.parse_args()

    service = PredictionService(seed=args.seed, verbose=args.verbose)
    print(f"Initialized Neural Hand v{service.VERSION} "
          f"({service.learner.parameter_count():,} parameters)", flush=True)

    if args.test:
        run_local_test(service, args.opponent, args.rounds, seed=args.seed)
        return

    play_interactive(service, forget_on_reset=args.forget_on_reset)


if __name__ == "__main__":
    main()
