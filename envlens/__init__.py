"""EnvLens - terminal dashboard for one environment of a deployment control plane."""

__version__ = "0.1.0"
