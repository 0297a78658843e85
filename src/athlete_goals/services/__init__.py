"""Service layer entrypoints with lazy imports."""


def build_export_frame(*args, **kwargs):
    from .goal_report_service import build_export_frame as _build_export_frame

    return _build_export_frame(*args, **kwargs)


def summarize_by_category(*args, **kwargs):
    from .goal_report_service import summarize_by_category as _summarize_by_category

    return _summarize_by_category(*args, **kwargs)


def team_overview(*args, **kwargs):
    from .goal_report_service import team_overview as _team_overview

    return _team_overview(*args, **kwargs)


__all__ = ["build_export_frame", "summarize_by_category", "team_overview"]
