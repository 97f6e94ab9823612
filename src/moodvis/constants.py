# --- Analyser Settings ---
DEFAULT_FPS = 60  # One tick per display refresh
DEFAULT_SAMPLE_RATE = 44100
FFT_SIZE = 2048
SMOOTHING_TIME_CONSTANT = 0.85  # 0.0 = raw spectrum, 0.9 = heavy averaging
MIN_FFT_SIZE = 32
MAX_FFT_SIZE = 32768

# --- Feature Extraction ---
SPLIT_FREQ = 300.0  # Hz boundary between "low" and "high" bins
CENTROID_NORM_HZ = 4000.0

# --- Mood Classification ---
CLASSIFY_EVERY = 30  # Ticks between classifications, avoids label flicker
JOYFUL_ENERGY = 0.08
JOYFUL_CENTROID = 0.35
JOYFUL_FLUX = 0.6
BASS_LOW_RATIO = 0.55
BASS_ENERGY = 0.06
TREBLE_CENTROID = 0.5
TREBLE_HIGH_RATIO = 0.5
MELANCHOLIC_ENERGY = 0.05
MELANCHOLIC_FLUX = 0.3

IDLE_CYCLE_SECONDS = 15.0  # Random mood change while no audio is active

# --- Intensity Smoothing ---
FLUX_DECAY = 0.92
ENERGY_WEIGHT = 2.0
FLUX_WEIGHT = 0.4
INITIAL_INTENSITY = 0.5

# --- Shape Population ---
DEFAULT_CANVAS = (960, 380)
EDGE_MARGIN = 10  # Bounce distance from the canvas border
MAX_VELOCITY = 1.2

PALETTES = {
    "bass": ["#55c1ff", "#35d0c3", "#9fd3ff", "#bfe9ff"],
    "treble": ["#39a9ff", "#22e0c3", "#cfe7ff", "#e6f2ff"],
    "joyful": ["#4fd1ff", "#3de6c8", "#b6f5ff", "#ffffff"],
    "melancholic": ["#89b4ff", "#6fd9ce", "#cfe9f9", "#eaf2ff"],
}

MOOD_LABELS = {
    "bass": "低沉",
    "treble": "高亢",
    "joyful": "欢快",
    "melancholic": "忧郁",
}
