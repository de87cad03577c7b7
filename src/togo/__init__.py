"""togo: per-user daily task quota tracker."""

__version__ = "0.1.0"
