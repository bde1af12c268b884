"""
Play the shape-counting game in the terminal while webcam and screen captures
are uploaded to the server.
"""
import argparse
import logging

import config
from capture_client import CaptureClient
from game import ShapeGame, generate_questions


def ask(prompt: str, options: list[int]) -> int:
    while True:
        raw = input(prompt).strip()
        if raw.isdigit() and int(raw) in options:
            return int(raw)
        print(f"Pick one of {options}")


def play(game: ShapeGame):
    while not game.is_over:
        q = game.question
        print(f"\nHow many {q.shape}s are in the picture?")
        print("  " + " ".join(q.sequence))
        game.answer(ask(f"Options {q.options}: ", q.options))
        if game.is_correct:
            print(f"{game.face()} Correct!")
        else:
            print(f"{game.face()} Wrong! The correct answer was {q.correct_answer}.")
        game.next_question()
    print(f"\nYour score: {game.score} / {len(game.questions)}")


def main():
    p = argparse.ArgumentParser(description="Shape counting game with emotion capture")
    p.add_argument("--api-url", default=config.API_URL, help="Server base URL")
    p.add_argument("--interval", type=float, default=config.CAPTURE_INTERVAL, help="Seconds between captures (3-5)")
    p.add_argument("--camera", type=int, default=config.CAMERA_INDEX, help="OpenCV camera index")
    p.add_argument("--questions", type=int, default=5, help="Questions per game")
    args = p.parse_args()

    logging.basicConfig(
        level=config.LOG_LEVEL,
        format="%(asctime)s.%(msecs)03d %(levelname)s %(message)s",
        datefmt="%H:%M:%S",
    )

    game = ShapeGame(generate_questions(args.questions))
    with CaptureClient(api_url=args.api_url, interval=args.interval, camera_index=args.camera) as client:
        print(f"Session {client.session_id} - have fun!")
        while True:
            play(game)
            if input("Play again? [y/N] ").strip().lower() != "y":
                break
            game.restart()


if __name__ == "__main__":
    main()
