"""
E2E 테스트용 Playwright 설정.

설정:
- 기본 타임아웃: 30초
- viewport: 1280x720
- headless (CI 기본값, 로컬은 --headed)
- 실패 시 디버깅 정보 저장:
  - 스크린샷 (.png)
  - HTML 덤프 (.html), 세션 쿠키 마스킹
  - 콘솔 로그 (.log)
  - Playwright trace (.zip), CI에서만
"""

import os
import re
from collections.abc import Generator
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING

import pytest

# Playwright는 선택적 의존성 (e2e extra)
try:
    from playwright.sync_api import Browser, BrowserContext, Page

    PLAYWRIGHT_AVAILABLE = True
except ImportError:
    PLAYWRIGHT_AVAILABLE = False
    Browser = None  # type: ignore[misc,assignment]
    BrowserContext = None  # type: ignore[misc,assignment]
    Page = None  # type: ignore[misc,assignment]

if TYPE_CHECKING:
    from playwright.sync_api import Browser, BrowserContext, Page

# =============================================================================
# Constants
# =============================================================================

ARTIFACTS_DIR = Path(__file__).parent / "artifacts"
IS_CI = os.getenv("CI") == "true"

SENSITIVE_PATTERNS = [
    (r"(povistka_session)=([A-Za-z0-9_-]{16,})", r"\1=[MASKED]"),
    (r"(/ui/images/)([A-Za-z0-9_-]{16,})", r"\1[MASKED]"),
]


def mask_sensitive_data(content: str) -> str:
    """세션 id와 이미지 핸들 마스킹."""
    masked = content
    for pattern, replacement in SENSITIVE_PATTERNS:
        masked = re.sub(pattern, replacement, masked)
    return masked


# =============================================================================
# Playwright 기본 설정 (Playwright가 설치된 경우에만 활성화)
# =============================================================================

if PLAYWRIGHT_AVAILABLE:

    @pytest.fixture(scope="session")
    def browser_context_args(browser_context_args: dict) -> dict:
        args = {
            **browser_context_args,
            "viewport": {"width": 1280, "height": 720},
            "accept_downloads": True,
        }
        if IS_CI:
            args["record_video_dir"] = str(ARTIFACTS_DIR / "videos")
        return args

    @pytest.fixture
    def context(
        browser: "Browser", browser_context_args: dict
    ) -> "Generator[BrowserContext, None, None]":
        context = browser.new_context(**browser_context_args)
        yield context
        context.close()

    @pytest.fixture
    def page(context: "BrowserContext") -> "Generator[Page, None, None]":
        """타임아웃 30초 + 콘솔 로그 수집 page fixture."""
        if IS_CI:
            context.tracing.start(screenshots=True, snapshots=True, sources=True)

        page = context.new_page()
        page.set_default_timeout(30000)
        page.set_default_navigation_timeout(30000)

        console_logs: list[str] = []
        page.on("console", lambda msg: console_logs.append(f"[{msg.type}] {msg.text}"))
        page.on("pageerror", lambda err: console_logs.append(f"[PAGE_ERROR] {err}"))
        page._console_logs = console_logs  # type: ignore[attr-defined]

        yield page

        page.close()


# =============================================================================
# 실패 시 디버깅 정보 저장
# =============================================================================


def _generate_artifact_name(item_name: str, extension: str) -> str:
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    # test_foo[chromium] -> test_foo
    clean_name = item_name.split("[")[0]
    return f"{clean_name}_{timestamp}{extension}"


@pytest.hookimpl(tryfirst=True, hookwrapper=True)
def pytest_runtest_makereport(item, call):
    """브라우저 테스트 실패 시 스크린샷 / HTML / 콘솔 로그 저장."""
    outcome = yield
    rep = outcome.get_result()

    if rep.when != "call" or not rep.failed:
        return

    page = item.funcargs.get("page")
    context = item.funcargs.get("context")
    if not page:
        return

    ARTIFACTS_DIR.mkdir(exist_ok=True)
    base_name = _generate_artifact_name(item.name, "")

    screenshot_path = ARTIFACTS_DIR / f"{base_name}.png"
    try:
        page.screenshot(path=str(screenshot_path), full_page=True)
        print(f"\nScreenshot: {screenshot_path}")
    except Exception as e:
        print(f"\nScreenshot failed: {e}")

    html_path = ARTIFACTS_DIR / f"{base_name}.html"
    try:
        html_path.write_text(mask_sensitive_data(page.content()), encoding="utf-8")
        print(f"HTML dump: {html_path}")
    except Exception as e:
        print(f"HTML dump failed: {e}")

    log_path = ARTIFACTS_DIR / f"{base_name}.log"
    console_logs = getattr(page, "_console_logs", [])
    if console_logs:
        log_path.write_text(mask_sensitive_data("\n".join(console_logs)), encoding="utf-8")
        print(f"Console log: {log_path}")

    if IS_CI and context:
        trace_path = ARTIFACTS_DIR / f"{base_name}.zip"
        try:
            context.tracing.stop(path=str(trace_path))
            print(f"Trace: {trace_path}")
        except Exception as e:
            print(f"Trace failed: {e}")
