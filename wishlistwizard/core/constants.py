# Amazon
AMAZON_BASE_URL = "https://www.amazon.com"
WISHLIST_URL_PREFIX = "https://www.amazon.com/hz/wishlist/ls/"

# Wishlist page selectors
LIST_NAME_SELECTOR = "span#profile-list-name"
ITEM_NODE_SELECTOR = 'div[id*="itemInfo_"]'
NON_CATALOG_MARKER_SELECTOR = 'div[data-csa-c-item-id*="NON_ASIN"]'
NON_CATALOG_NAME_SELECTOR = 'span[id*="itemName_"]'
CATALOG_NAME_SELECTOR = 'a[id*="itemName_"]'
BYLINE_SELECTOR = 'span[id*="item-byline-"]'
OPTION_SELECTOR = "span#twisterText"
END_OF_LIST_SELECTOR = 'h1:has-text("End of list")'

# CAPTCHA challenge
CAPTCHA_PROMPT_SELECTOR = "text=Enter the characters you see below"
CAPTCHA_CONTAINER_SELECTOR = 'xpath=//div[@class="a-row a-text-center"]'
CAPTCHA_INPUT_SELECTOR = "input#captchacharacters"

# Search fallback
SEARCH_URL_TEMPLATE = "https://duckduckgo.com/?t=h_&q=official+site+{query}++-site%3Aamazon.*&t=h_&ia=web"
ORGANIC_RESULT_SELECTOR = 'li[data-layout="organic"] h2 a'

# Timing (milliseconds)
SCROLL_SETTLE_MS = 1000
STABILIZE_POLL_MS = 500
STABILIZE_THRESHOLD_MS = 10000
CAPTCHA_DETECT_TIMEOUT_MS = 5000
CAPTCHA_SETTLE_MS = 3000
SEARCH_SETTLE_MS = 3000
SEARCH_RESULT_TIMEOUT_MS = 10000

# Resource Limits
MAX_SCROLL_ATTEMPTS = 30
MAX_LOG_SIZE_BYTES = 10 * 1024 * 1024  # 10 MB

# Browser Settings
DEFAULT_USER_AGENT = "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/131.0.0.0 Safari/537.36"
BROWSER_LAUNCH_ARGS = ["--disable-blink-features=AutomationControlled", "--no-sandbox"]
MAC_CHROME_PATH = "/Applications/Google Chrome.app/Contents/MacOS/Google Chrome"

# CSV
CSV_BASE_COLUMNS = ["Item Name", "Manufacturer", "Product Link", "Non-Amazon Link"]
