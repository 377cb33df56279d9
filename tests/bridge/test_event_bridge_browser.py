"""In-page behaviour of the event bridge, driven through a real headless Chromium."""
import asyncio
import pytest
from webreplay.bridge.channel import EventBridge
from webreplay.core.errors import SelectorTimeoutError
from webreplay.recording.actions import ActionType
from webreplay.recording.session import RecordingSession
from webreplay.replay.driver import PlaywrightDriver

pytestmark = pytest.mark.browser

TEST_URL = "http://webreplay.test/"
DERIVE = "s => window.__webreplay.deriveSelector(document.querySelector(s))"


async def wait_for_actions(session, count, timeout=3.0):
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while len(session.actions) < count and loop.time() < deadline:
        await asyncio.sleep(0.05)
    return session.actions


@pytest.fixture
async def recording(browser_page):
    session = RecordingSession()
    bridge = EventBridge(session)
    await bridge.install(browser_page)

    async def load(html):
        async def serve(route):
            await route.fulfill(status=200, content_type="text/html", body=html)

        # A real navigation, so the init script runs the way it does on live sites
        await browser_page.route(TEST_URL, serve)
        await browser_page.goto(TEST_URL)

    return browser_page, session, load


async def test_id_wins_over_classes_and_position(recording):
    page, _, load = recording
    await load('<div><button class="a b">x</button><button id="go" class="primary">y</button></div>')
    assert await page.evaluate(DERIVE, "button.primary") == "#go"

async def test_classes_joined_and_blank_tokens_dropped(recording):
    page, _, load = recording
    await load('<p><span class="  alpha   beta ">t</span></p>')
    assert await page.evaluate(DERIVE, "span") == ".alpha.beta"

async def test_path_uses_rank_among_same_tag_siblings(recording):
    page, _, load = recording
    await load("<div><span>s</span><p>one</p><p>two</p></div>")
    selector = await page.evaluate(DERIVE, "p:last-of-type")
    assert selector == "html > body > div > p:nth-child(2)"

async def test_path_without_same_tag_siblings_has_no_qualifier(recording):
    page, _, load = recording
    await load("<section><article><em>x</em></article></section>")
    assert await page.evaluate(DERIVE, "em") == "html > body > section > article > em"

async def test_derivation_is_deterministic(recording):
    page, _, load = recording
    await load("<ul><li>a</li><li>b</li><li>c</li></ul>")
    first = await page.evaluate(DERIVE, "li:nth-of-type(3)")
    second = await page.evaluate(DERIVE, "li:nth-of-type(3)")
    assert first == second == "html > body > ul > li:nth-child(3)"

async def test_click_is_forwarded_with_selector(recording):
    page, session, load = recording
    await load('<button id="go" style="width:100px;height:40px">Go</button>')
    session.start()
    await page.click("#go")

    actions = await wait_for_actions(session, 1)
    assert actions[0].type == ActionType.CLICK
    assert actions[0].data.selector == "#go"
    assert actions[0].data.x is not None

async def test_clicks_before_start_are_not_recorded(recording):
    page, session, load = recording
    await load('<button id="go">Go</button>')
    await page.click("#go")
    await asyncio.sleep(0.3)
    assert session.actions == ()

async def test_input_and_select_changes(recording):
    page, session, load = recording
    await load(
        '<input id="name"><select id="country"><option value="de">DE</option>'
        '<option value="fr">FR</option></select>'
    )
    session.start()
    await page.fill("#name", "Ada")
    await page.dispatch_event("#name", "change")
    await page.select_option("#country", "fr")

    actions = await wait_for_actions(session, 2)
    kinds = {a.type: a.data for a in actions}
    assert kinds[ActionType.TYPE].text == "Ada"
    assert kinds[ActionType.TYPE].selector == "#name"
    assert kinds[ActionType.SELECT].value == "fr"

async def test_checkbox_change_is_recorded_as_click_only(recording):
    page, session, load = recording
    await load('<input id="agree" type="checkbox"><input id="email" type="email">')
    session.start()
    await page.check("#agree")
    await page.fill("#email", "ada@example.com")
    await page.dispatch_event("#email", "change")

    actions = await wait_for_actions(session, 2)
    assert [a.type for a in actions] == [ActionType.CLICK, ActionType.TYPE]
    assert actions[0].data.selector == "#agree"
    assert actions[1].data.text == "ada@example.com"

async def test_scroll_burst_emits_final_position_once(recording):
    page, session, load = recording
    await load('<div style="height:5000px">tall</div>')
    session.start()
    await page.evaluate("""async () => {
        const pause = (ms) => new Promise((r) => setTimeout(r, ms));
        window.scrollTo(0, 100);
        await pause(50);
        window.scrollTo(0, 200);
        await pause(50);
        window.scrollTo(0, 300);
    }""")
    await asyncio.sleep(0.8)

    scrolls = [a for a in session.actions if a.type == ActionType.SCROLL]
    assert len(scrolls) == 1
    assert scrolls[0].data.y == 300

async def test_text_selection_uses_parent_of_text_node(recording):
    page, session, load = recording
    await load('<p id="quote">Hello brave world</p>')
    session.start()
    await page.evaluate("""() => {
        const node = document.querySelector('#quote').firstChild;
        const range = document.createRange();
        range.setStart(node, 6);
        range.setEnd(node, 11);
        const selection = window.getSelection();
        selection.removeAllRanges();
        selection.addRange(range);
    }""")

    actions = await wait_for_actions(session, 1)
    selections = [a for a in actions if a.type == ActionType.TEXT_SELECTION]
    assert selections
    assert selections[-1].data.selector == "#quote"
    assert selections[-1].data.selected_text == "brave"

async def test_driver_selects_first_matching_text_node(browser_page):
    await browser_page.set_content('<div id="box"><span>alpha</span><em>beta gamma</em></div>')
    driver = PlaywrightDriver(browser_page)

    assert await driver.select_text("#box", "gamma") is True
    assert await browser_page.evaluate("() => window.getSelection().toString()") == "gamma"
    assert await driver.select_text("#box", "delta") is False

async def test_driver_wait_times_out_for_missing_element(browser_page):
    await browser_page.set_content("<p>nothing here</p>")
    driver = PlaywrightDriver(browser_page)
    with pytest.raises(SelectorTimeoutError):
        await driver.wait_for_visible("#absent", 200)
