TOP_TEXT = "KHAJIIT HAS WARES"
BOTTOM_TEXT = "IF YOU HAVE COIN"
ALT_TEXT = "Khajiit has wares, if you have coin."

FONT_SIZE = 128
BORDER_SIZE = 6
TEXT_MARGIN = 20
OUTER_MARGIN = 10
JPEG_QUALITY = 95

TEXT_FILL_COLOR = (255, 255, 255)
TEXT_STROKE_COLOR = (0, 0, 0)

FETCH_TIMEOUT = 30
