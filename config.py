# config.py
import os

# ======= Seeds / bed defaults =======
DEFAULT_SEED = os.getenv("GP_DEFAULT_SEED", "default")
BED_WIDTH    = int(os.getenv("GP_BED_WIDTH", "8"))
BED_HEIGHT   = int(os.getenv("GP_BED_HEIGHT", "4"))

# Reject grids larger than this before any solver work starts.
MAX_GRID_CELLS = int(os.getenv("GP_MAX_GRID_CELLS", "4096"))

# ======= Companion scoring =======
ENEMY_PENALTY     = int(os.getenv("GP_ENEMY_PENALTY", "1000"))
REJECT_THRESHOLD  = int(os.getenv("GP_REJECT_THRESHOLD", "-100"))   # score <= this means an enemy is adjacent
ACCEPT_MIN_SCORE  = int(os.getenv("GP_ACCEPT_MIN_SCORE", "-99"))    # gap fill places only at or above this
FRIEND_BONUS      = int(os.getenv("GP_FRIEND_BONUS", "1"))
MUTUALISM_BONUS   = int(os.getenv("GP_MUTUALISM_BONUS", "1"))       # flower <-> vegetable friendship

# ======= Gap-fill diversity weights =======
VEGETABLE_BONUS            = float(os.getenv("GP_VEGETABLE_BONUS", "2"))
DUPLICATE_CROP_PENALTY     = float(os.getenv("GP_DUPLICATE_CROP_PENALTY", "0.5"))
DUPLICATE_FAMILY_PENALTY   = float(os.getenv("GP_DUPLICATE_FAMILY_PENALTY", "0.25"))
FLOWER_CAP_RATIO           = float(os.getenv("GP_FLOWER_CAP_RATIO", "0.15"))

# ======= Viability =======
# Largest season extension considered when classifying a crop as "marginal".
MAX_EXTENSION_WEEKS = int(os.getenv("GP_MAX_EXTENSION_WEEKS", "8"))

# ======= Output names =======
REPORT_OUT  = os.getenv("GP_REPORT_OUT", "placement_report.txt")
LAYOUT_HTML = os.getenv("GP_LAYOUT_HTML", "layout_view.html")

class CFG:
    DEFAULT_SEED   = DEFAULT_SEED
    BED_WIDTH      = BED_WIDTH
    BED_HEIGHT     = BED_HEIGHT
    MAX_GRID_CELLS = MAX_GRID_CELLS

    ENEMY_PENALTY    = ENEMY_PENALTY
    REJECT_THRESHOLD = REJECT_THRESHOLD
    ACCEPT_MIN_SCORE = ACCEPT_MIN_SCORE
    FRIEND_BONUS     = FRIEND_BONUS
    MUTUALISM_BONUS  = MUTUALISM_BONUS

    VEGETABLE_BONUS          = VEGETABLE_BONUS
    DUPLICATE_CROP_PENALTY   = DUPLICATE_CROP_PENALTY
    DUPLICATE_FAMILY_PENALTY = DUPLICATE_FAMILY_PENALTY
    FLOWER_CAP_RATIO         = FLOWER_CAP_RATIO

    MAX_EXTENSION_WEEKS = MAX_EXTENSION_WEEKS

    REPORT_OUT  = REPORT_OUT
    LAYOUT_HTML = LAYOUT_HTML

# legacy convenience
DEFAULT_SEED = CFG.DEFAULT_SEED

__all__ = ["CFG", "DEFAULT_SEED"]
