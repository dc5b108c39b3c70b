"""
Centralized constants for Document Formatter.
All magic numbers used by the formatting core live here.
"""

# ===========================================
# DOCUMENT SIZE MODES
# ===========================================
LARGE_DOCUMENT_THRESHOLD = 100_000    # chars; above this the pipeline chunks
HUGE_DOCUMENT_THRESHOLD = 1_000_000   # chars; flagged as huge in Document
CHUNK_SIZE = 10_000                   # chars per chunk in chunked mode

# ===========================================
# PREVIEW ADMISSION CONTROL
# ===========================================
PREVIEW_SOFT_CAP = 30_000             # render in full up to here
PREVIEW_HARD_CAP = 100_000            # truncated preview up to here
PREVIEW_DISABLE_THRESHOLD = 300_000   # no preview at all beyond this

# ===========================================
# STRUCTURE ANALYSIS
# ===========================================
HEADING_ACCEPTANCE_THRESHOLD = 0.7    # minimum confidence for a heading
LANGUAGE_MIN_SIGNATURE_HITS = 2       # votes needed to classify code
MAX_HEADING_LEVEL = 6

# ===========================================
# SECTION TYPES / MERGING
# ===========================================
SECTION_CONFIDENCE_THRESHOLD = 0.7    # minimum score for a typed section
SECTION_MAX_LINE_LENGTH = 200         # longer lines are never section titles
MAX_MERGE_CHARS = 50 * 1024 * 1024    # per source document

# ===========================================
# SANITIZER
# ===========================================
FULL_NORMALIZE_MAX_CHARS = 20_000     # slow path only below this size
TAG_MISMATCH_TOLERANCE = 0.1          # 10% of expected closers

# ===========================================
# PROGRESS
# ===========================================
PROGRESS_CHUNK_CEILING = 90           # chunks report 0-90
PROGRESS_SANITIZE = 95
PROGRESS_COMPLETE = 100

# ===========================================
# METADATA / PERFORMANCE
# ===========================================
WORDS_PER_MINUTE = 250                # reading speed
STAGE_WARN_SECONDS = 2.0              # slow stage warning
LARGE_TEXT_RECOMMENDATION = 500_000   # chars
MANY_TABLES_RECOMMENDATION = 50

# ===========================================
# LOGGING
# ===========================================
LOG_LEVEL = 'INFO'
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
LOG_FILE = 'logs/formatter.log'
LOG_MAX_SIZE_MB = 10
LOG_BACKUP_COUNT = 5
