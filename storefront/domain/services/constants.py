# Catalog limits shared by the API and the admin client.
MAX_GALLERY_IMAGES = 10        # Product.images
MAX_DESCRIPTION_IMAGES = 20    # Product.description_images

# Client-side upload ceilings (the server has its own, see Settings.max_upload_mb)
MAX_IMAGE_BYTES = 10 * 1024 * 1024
MAX_VIDEO_BYTES = 100 * 1024 * 1024

# Defaults for a freshly published product
STATUS_ONLINE = "online"
DEFAULT_RATING = 5.0

# Catch-all category: selecting it lists every product
ALL_PRODUCTS_CATEGORY = "Bidhaa Zote"

# Seeded when the categories collection is empty
DEFAULT_CATEGORIES = [
    {"name": "Mobiles", "icon": "📱"},
    {"name": "Spika", "icon": "🔊"},
    {"name": "Mic", "icon": "🎤"},
    {"name": "Subwoofer", "icon": "📻"},
    {"name": ALL_PRODUCTS_CATEGORY, "icon": "📦"},
]

# Stats
EARNINGS_RATIO = 0.85          # earnings = int(net sales * ratio)
ORDER_STATUS_COMPLETED = "completed"
ZERO_STATS = {"netSales": 0, "earnings": 0, "pageViews": 0, "totalOrders": 0}

# Guest activity ring buffer size (client only)
MAX_GUEST_ACTIVITY = 50