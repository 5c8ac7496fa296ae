import os
from typing import Mapping, Optional

from baselinekit.constants import (
    DEFAULT_BASELINE_URL,
    DEFAULT_REF,
    ENV_BASELINE,
    ENV_BASELINE_REF,
)
from baselinekit.model.baseline import BaselineSource, Precedence, RefPrecedence


class SourceResolver:
    """
    Decide which baseline location and reference to use.

    Location precedence: explicit override > ``BASELINEKIT_BASELINE`` > default.
    The reference is resolved on its own: ``BASELINEKIT_BASELINE_REF`` or the
    default branch.

    Args:
        environ: Environment mapping to read (defaults to ``os.environ``)
        default_location: Built-in baseline location
        default_ref: Built-in reference
    """

    def __init__(
        self,
        environ: Optional[Mapping[str, str]] = None,
        default_location: str = DEFAULT_BASELINE_URL,
        default_ref: str = DEFAULT_REF,
    ):
        self.environ = os.environ if environ is None else environ
        self.default_location = default_location
        self.default_ref = default_ref

    def resolve(self, explicit_override: Optional[str] = None) -> BaselineSource:
        if explicit_override:
            location, precedence = explicit_override, Precedence.explicit_override
        elif self.environ.get(ENV_BASELINE):
            location, precedence = self.environ[ENV_BASELINE], Precedence.configured
        else:
            location, precedence = self.default_location, Precedence.default

        configured_ref = self.environ.get(ENV_BASELINE_REF)
        if configured_ref:
            reference, ref_precedence = configured_ref, RefPrecedence.environment
        else:
            reference, ref_precedence = self.default_ref, RefPrecedence.defaulted

        return BaselineSource(
            location=location,
            reference=reference,
            precedence=precedence,
            ref_precedence=ref_precedence,
        )
