"""goci: a local CI runner for Go projects (build, test, gofmt, git push)."""

__version__ = "0.1.0"
