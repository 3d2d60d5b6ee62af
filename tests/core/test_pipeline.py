import asyncio
import pytest
from fakes import FakeElement, FakePage, catalog_node, non_catalog_node
from wishlistwizard.core.constants import (
    CAPTCHA_CONTAINER_SELECTOR,
    CAPTCHA_INPUT_SELECTOR,
    CAPTCHA_PROMPT_SELECTOR,
    END_OF_LIST_SELECTOR,
    ITEM_NODE_SELECTOR,
    LIST_NAME_SELECTOR,
    ORGANIC_RESULT_SELECTOR,
)
from wishlistwizard.core.errors import ListNameUnresolvedError
from wishlistwizard.core.models import UrlStatus
from wishlistwizard.core.pipeline import WishlistPipeline
from wishlistwizard.recon.scroll import ScrollCompletionDetector

LIST_A = "https://www.amazon.com/hz/wishlist/ls/AAAA"
LIST_B = "https://www.amazon.com/hz/wishlist/ls/BBBB"
SEARCH = "https://duckduckgo.com/"


def wishlist_route(name, nodes):
    route = {
        ITEM_NODE_SELECTOR: nodes,
        END_OF_LIST_SELECTOR: [FakeElement(text="End of list")],
    }
    if name is not None:
        route[LIST_NAME_SELECTOR] = [FakeElement(text=name)]
    return route


def blocked_route(name):
    route = wishlist_route(name, [catalog_node()])
    route[CAPTCHA_PROMPT_SELECTOR] = [FakeElement(text="Enter the characters you see below")]
    route[CAPTCHA_CONTAINER_SELECTOR] = [FakeElement(image=b"png")]
    route[CAPTCHA_INPUT_SELECTOR] = [FakeElement()]
    return route


def make_pipeline(page, tmp_path, solver=lambda art: "answer", **kwargs):
    return WishlistPipeline(
        page,
        solver=solver,
        output_dir=tmp_path,
        renderer=lambda data: "ART",
        scroll_detector=ScrollCompletionDetector(page, clock=page.clock),
        **kwargs,
    )


def test_end_to_end_two_items(tmp_path):
    page = FakePage(routes={
        LIST_A: wishlist_route("Home Office", [
            catalog_node(name="Desk Lamp", byline="Acme", options=("Black", "US Plug")),
            FakeElement(),
            non_catalog_node("https://maker.example/lamp"),
        ]),
        SEARCH: {},
    })

    report = asyncio.run(make_pipeline(page, tmp_path).run([LIST_A]))

    assert [o.status for o in report.outcomes] == [UrlStatus.DONE]
    assert report.outcomes[0].item_count == 2
    csv_text = (tmp_path / "Home_Office.csv").read_text(encoding="utf-8")
    assert csv_text.split("\n") == [
        "Item Name,Manufacturer,Product Link,Non-Amazon Link,Option 1,Option 2",
        "Desk Lamp,Acme,https://www.amazon.com/dp/B000X?th=1,,Black,US Plug",
        ",,,https://maker.example/lamp,,",
    ]
    # Only the catalog item needed a search lookup
    assert len([u for u in page.visited if u.startswith(SEARCH)]) == 1


def test_search_result_fills_external_link(tmp_path):
    page = FakePage(routes={
        LIST_A: wishlist_route("Lamps", [catalog_node(name="Desk Lamp", byline="Acme", options=())]),
        SEARCH: {ORGANIC_RESULT_SELECTOR: [FakeElement(attrs={"href": "/l/?uddg=https%3A%2F%2Facme.example%2Flamp"})]},
    })
    asyncio.run(make_pipeline(page, tmp_path).run([LIST_A]))
    rows = (tmp_path / "Lamps.csv").read_text(encoding="utf-8").split("\n")
    assert rows[1] == "Desk Lamp,Acme,https://www.amazon.com/dp/B000X?th=1,https://acme.example/lamp"


def test_search_can_be_disabled(tmp_path):
    page = FakePage(routes={LIST_A: wishlist_route("Lamps", [catalog_node()])})
    asyncio.run(make_pipeline(page, tmp_path, search_enabled=False).run([LIST_A]))
    assert page.visited == [LIST_A]
    assert (tmp_path / "Lamps.csv").exists()


def test_failed_captcha_skips_url_and_continues(tmp_path):
    page = FakePage(routes={
        LIST_A: blocked_route("Blocked List"),
        LIST_B: wishlist_route("Second List", [non_catalog_node("https://maker.example/a")]),
        SEARCH: {},
    })
    answers = []

    def solver(art):
        answers.append(art)
        return "wrong"

    report = asyncio.run(make_pipeline(page, tmp_path, solver=solver).run([LIST_A, LIST_B]))

    assert [o.status for o in report.outcomes] == [UrlStatus.FAILED, UrlStatus.DONE]
    assert "CAPTCHA" in report.outcomes[0].error
    assert not (tmp_path / "Blocked_List.csv").exists()
    assert (tmp_path / "Second_List.csv").exists()
    assert answers == ["ART"]


def test_missing_list_name_fails_only_that_url(tmp_path):
    page = FakePage(routes={
        LIST_A: wishlist_route(None, [catalog_node()]),
        LIST_B: wishlist_route("Kept", [non_catalog_node("Just a note")]),
        SEARCH: {},
    })
    report = asyncio.run(make_pipeline(page, tmp_path).run([LIST_A, LIST_B]))
    assert [o.status for o in report.outcomes] == [UrlStatus.FAILED, UrlStatus.DONE]
    assert len(report.failed) == 1
    assert sorted(p.name for p in tmp_path.iterdir()) == ["Kept.csv"]


def test_blank_list_name_raises(tmp_path):
    page = FakePage({LIST_NAME_SELECTOR: [FakeElement(text="   ")]})
    with pytest.raises(ListNameUnresolvedError):
        asyncio.run(make_pipeline(page, tmp_path).resolve_list_name())


def test_list_name_is_sanitized(tmp_path):
    page = FakePage({LIST_NAME_SELECTOR: [FakeElement(text=" Mom's B-day / 2024 ")]})
    assert asyncio.run(make_pipeline(page, tmp_path).resolve_list_name()) == "Mom_s_B_day___2024"


def test_incomplete_scroll_still_exports(tmp_path):
    route = wishlist_route("Long List", [catalog_node()])
    route[END_OF_LIST_SELECTOR] = []
    page = FakePage(routes={LIST_A: route, SEARCH: {}})

    report = asyncio.run(make_pipeline(page, tmp_path).run([LIST_A]))

    assert report.outcomes[0].status == UrlStatus.DONE
    assert (tmp_path / "Long_List.csv").exists()
    assert len(page.evaluations) == 30


def test_unexpected_errors_propagate(tmp_path):
    class BrokenPage(FakePage):
        async def goto(self, url, wait_until=None, **kwargs):
            raise RuntimeError("net::ERR_NAME_NOT_RESOLVED")

    page = BrokenPage()
    with pytest.raises(RuntimeError):
        asyncio.run(make_pipeline(page, tmp_path).run([LIST_A, LIST_B]))
