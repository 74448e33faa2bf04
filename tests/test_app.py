from worklog_app.app import PAGES, ordered_pages, register_page


def test_preferred_pages_come_first():
    labels = ["Setup / Connection", "Zeta Debug", "My Worklogs", "Alpha"]
    assert ordered_pages(labels) == ["My Worklogs", "Setup / Connection", "Alpha", "Zeta Debug"]


def test_register_page_records_callable():
    @register_page("Test Page")
    def _page():
        return "rendered"

    try:
        assert PAGES["Test Page"]() == "rendered"
    finally:
        PAGES.pop("Test Page", None)
