from __future__ import annotations

from medicoweb.schemas.search import SearchState, SearchView


WELCOME_MESSAGE = "Your AI-powered drug reference guide."
EMPTY_RESULT_MESSAGE = "No data found for the specified drug."


def build_view(state: SearchState) -> SearchView:
    """Pick the one banner the page shows for ``state``. Error wins over any result."""
    if state.loading:
        return SearchView(kind="loading")
    if state.error:
        return SearchView(kind="error", message=state.error)
    if not state.has_searched:
        return SearchView(kind="welcome", message=WELCOME_MESSAGE)
    if state.monograph is not None and not state.monograph.is_empty():
        return SearchView(
            kind="monograph",
            show_image=state.image is not None,
            dose_calculator_drug=state.monograph.drug_name.strip() or state.drug_name,
        )
    return SearchView(kind="empty", message=EMPTY_RESULT_MESSAGE)
