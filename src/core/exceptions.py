class CodeGenerationExhausted(Exception):
    """No free quiz code was found within the retry budget."""

    def __init__(self, attempts: int):
        super().__init__(f"Could not generate a unique quiz code after {attempts} attempts")
        self.attempts = attempts


class QuizCodeConflict(Exception):
    """A quiz with the same code was inserted concurrently."""

    def __init__(self, code: str):
        super().__init__(f"Quiz code {code} is already taken")
        self.code = code


class InvalidAttemptTransition(Exception):
    """The requested action is not allowed in the attempt's current state."""
