"""
Verification code generator.

Produces the fixed-width numeric codes that are emailed to recipients.
"""

import secrets


class CodeGenerator:
    """
    Generates 6-digit numeric verification codes.

    Decision: Codes come from the secrets module (OS CSPRNG) rather than
    random. A 6-digit space is small, so predictability of the source is the
    only thing standing between a guesser and a valid code.
    """

    CODE_LENGTH = 6
    CODE_MIN = 100000
    CODE_MAX = 999999

    def generate(self) -> str:
        """
        Generate a new random code.

        Returns:
            A 6-digit decimal string, uniform over CODE_MIN..CODE_MAX inclusive
        """
        return str(self.CODE_MIN + secrets.randbelow(self.CODE_MAX - self.CODE_MIN + 1))
