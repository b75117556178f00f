import uuid
from typing import Protocol


class NameGenerator(Protocol):
    def __call__(self) -> str:
        """
        Generate a new unpredictable name component.

        Returns
        -------
        v
            A short string that does not contain path separators.
        """
        ...


def random_name() -> str:
    """
    Generate a name from a random (version 4) UUID in its 32 character hexadecimal form.
    """
    return uuid.uuid4().hex
