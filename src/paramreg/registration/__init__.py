"""Registration of images.

A [`Registration`][paramreg.registration.Registration] combines an image
metric and a regularizer into one objective and minimizes it with an
optimizer. It produces a lazy stream of
[`RegistrationState`][paramreg.registration.RegistrationState] objects.
"""

from ._registration import Registration, RegistrationState

__all__ = ["Registration", "RegistrationState"]
