"""Medical credential issuer.

Verifies a government ID name proof against the NPI registry and issues a
pseudonymous credential for the practitioner's specialty and license.
"""

__version__ = "0.1.0"
