"""Read cloud state from Edda in the shape of the AWS SDK's result objects."""

__version__ = "0.1.0"
