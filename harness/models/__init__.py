from harness.models.models import Event  # noqa: F401
