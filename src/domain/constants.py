"""
Domain Constants: 애플리케이션 전역 상수.

엔드포인트 경로, 필수 필드, 사용자 메시지, 파일명 정책.
"""

# =============================================================================
# Endpoints
# =============================================================================

GENERATE_ENDPOINT = "/generate"
IMAGE_URL_TEMPLATE = "/ui/images/{handle_id}"

# =============================================================================
# Form Fields
# =============================================================================
# 이 순서로 검사, 첫 누락 필드를 보고

REQUIRED_FORM_FIELDS = ("name", "address")

# 서비스 측 바이트 제한 (UTF-8 인코딩 길이)
FIELD_MAX_BYTES = {
    "name": 100,
    "address": 200,
    "issuer": 100,
}

# =============================================================================
# Output Filenames
# =============================================================================
# 저장 파일: povistka_<16 hex>.png

DOWNLOAD_PREFIX = "povistka_"
DOWNLOAD_EXTENSION = ".png"
DOWNLOAD_RANDOM_BYTES = 8
INLINE_FILENAME = "povistka.png"
IMAGE_MEDIA_TYPE = "image/png"

# =============================================================================
# Cache Policy
# =============================================================================

NO_CACHE = "no-cache, no-store, must-revalidate"
LONG_CACHE = "public, max-age=31536000"
LONG_CACHE_STATIC_PREFIXES = ("css/", "js/", "icons/", "fonts")

# =============================================================================
# User-facing Messages (uk)
# =============================================================================

MESSAGES = {
    "name_required": "Будь ласка, введіть ім'я",
    "address_required": "Будь ласка, введіть адресу",
    "loading": "Генерація повістки...",
    "error_prefix": "Помилка: ",
    "generic_failure": "Network response was not ok",
    "image_alt": "Згенерована повістка",
    "print": "Роздрукувати",
    "save": "Зберегти",
    "print_title": "Друк повістки",
    "print_alt": "Повістка",
    "image_expired": "Зображення більше недоступне. Згенеруйте повістку ще раз.",
}
