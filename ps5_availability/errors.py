"""
PS5 Availability — Error taxonomy

Probe and combination failures degrade to UNKNOWN results and are never
raised across job boundaries. Navigation and registry failures end one
retailer check only. Consent failures are always recovered.
"""

from __future__ import annotations


class CheckError(RuntimeError):
    """Base class for failures scoped to a single retailer check."""


class NavigationFailure(CheckError):
    """Network error or timeout while loading a retailer page."""


class ConsentHandlingFailure(CheckError):
    """Consent prompt could not be dismissed. Always swallowed by the check."""


class ProbeFailure(CheckError):
    """A DOM query raised. Recorded as an UNKNOWN validator outcome."""


class RegistryLookupFailure(CheckError):
    """No retailer descriptor is registered for the requested key."""


class CombinationInputFailure(CheckError):
    """Malformed evidence passed to the result combinator."""
