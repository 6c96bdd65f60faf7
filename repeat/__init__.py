"""repeat - spaced-repetition flashcards."""
