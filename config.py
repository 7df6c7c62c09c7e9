"""Central configuration for text region detection and enhancement.

All tunable parameters are defined here with descriptive names.
These values can be adjusted to fine-tune detection and enhancement.
"""

# =============================================================================
# LUMA / GRAYSCALE
# =============================================================================

# ITU-R BT.601 weights used for every grayscale conversion
LUMA_WEIGHTS = (0.299, 0.587, 0.114)

# Number of gray levels in a histogram
HISTOGRAM_BINS = 256

# =============================================================================
# GLOBAL PREPROCESSING
# =============================================================================

# Upscale factor used when scale_up is enabled (nearest neighbor)
SCALE_UP_FACTOR = 2

# Contrast stretch factor for the enhance_contrast step
CONTRAST_FACTOR = 1.5

# Center weights of the 3x3 sharpening kernels
SHARPEN_CENTER_WEIGHT = 5
TEXT_SHARPEN_CENTER_WEIGHT = 6

# Background estimation from the four image corners
BACKGROUND_SAMPLE_SIZE = 10
BACKGROUND_QUANTIZATION_STEP = 16
BACKGROUND_TOLERANCE = 30

# =============================================================================
# ADAPTIVE THRESHOLD
# =============================================================================

# A histogram peak must hold more than this many pixels to count
HISTOGRAM_PEAK_MIN_COUNT = 100

# =============================================================================
# REGION DETECTION
# =============================================================================

# Edge scanner (Sobel magnitude)
EDGE_BLOCK_SIZE = 20
EDGE_SCORE_THRESHOLD = 0.3

# Color scanner
COLOR_BLOCK_SIZE = 30
COLOR_QUANTIZATION_STEP = 32
COLOR_MAX_DOMINANT = 3
COLOR_VARIANCE_THRESHOLD = 50
COLOR_CONTRAST_DISTANCE = 100
COLOR_WEIGHT_LOW_VARIANCE = 0.4
COLOR_WEIGHT_FEW_COLORS = 0.3
COLOR_WEIGHT_HIGH_CONTRAST = 0.3

# Stroke scanner: fraction of dark pixels typical for printed text
STROKE_BLOCK_SIZE = 25
STROKE_DARK_LEVEL = 128
STROKE_MIN_DARK_RATIO = 0.10
STROKE_MAX_DARK_RATIO = 0.40

# =============================================================================
# REGION MERGING
# =============================================================================

# Top-left corners closer than this (pixels) end up in the same region
MERGE_DISTANCE = 50

# Merged regions must be strictly larger than this to survive
MIN_REGION_WIDTH = 20
MIN_REGION_HEIGHT = 10

# =============================================================================
# ENHANCEMENT
# =============================================================================

# White border added around each region before enhancement
REGION_PADDING = 10

# Contrast factor for region enhancement (aggressive)
REGION_CONTRAST_FACTOR = 2.0

# Global fallback enhancement (less aggressive)
GLOBAL_CONTRAST_FACTOR = 1.8
GLOBAL_EDGE_SAMPLE_STEP = 10
GLOBAL_MASK_DISTANCE_SCALE = 100.0
GLOBAL_MASK_THRESHOLD = 0.5
GLOBAL_COLOR_QUANTIZATION_STEP = 64

# =============================================================================
# IMAGE ANALYSIS (automatic option selection)
# =============================================================================

ANALYSIS_EDGE_DIFF = 30
ANALYSIS_LOW_CONTRAST = 50
ANALYSIS_VERY_LOW_CONTRAST = 30
ANALYSIS_NOISY_EDGE_RATIO = 0.1
ANALYSIS_SMALL_WIDTH = 800
ANALYSIS_SMALL_HEIGHT = 600
ANALYSIS_BRIGHT_BACKGROUND = 200
ANALYSIS_DARK_BACKGROUND = 50
