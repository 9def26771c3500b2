"""
Guess Feedback

Implements the Wordle letter evaluation algorithm.
"""

from typing import Dict, List, Optional

from ..models.game import LetterStatus


def evaluate(guess: str, target: str) -> List[Dict[str, str]]:
    """
    Compare a guess with the target word, letter by letter.

    Exact matches are resolved first and consume their target position.
    Remaining letters then take the leftmost unconsumed matching target
    position, so a repeated letter is never credited more times than it
    occurs in the target.

    Returns:
        List of ``{"letter": ..., "status": ...}``, one per position
    """
    guess = guess.upper()
    target = target.upper()
    if len(guess) != len(target):
        raise ValueError("Guess and target must be the same length")

    statuses: List[Optional[LetterStatus]] = [None] * len(guess)
    consumed = [False] * len(target)

    # First pass: exact position matches
    for i, letter in enumerate(guess):
        if letter == target[i]:
            statuses[i] = LetterStatus.CORRECT_POSITION
            consumed[i] = True

    # Second pass: right letter, wrong place
    for i, letter in enumerate(guess):
        if statuses[i] is not None:
            continue
        statuses[i] = LetterStatus.ABSENT
        for j, target_letter in enumerate(target):
            if not consumed[j] and j != i and target_letter == letter:
                statuses[i] = LetterStatus.CORRECT_WRONG_POSITION
                consumed[j] = True
                break

    return [
        {"letter": letter, "status": status.value}
        for letter, status in zip(guess, statuses)
    ]

