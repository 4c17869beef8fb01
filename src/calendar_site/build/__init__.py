"""Static site rebuild."""

from calendar_site.build.rebuild import BuildResult, SiteBuilder

__all__ = ["BuildResult", "SiteBuilder"]
