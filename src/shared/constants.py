from enum import IntEnum

# --- Источник тайлов
# Базовый URL тайлового сервера по умолчанию (slippy map, {z}/{x}/{y}.png)
DEFAULT_BASE_URL = 'https://a.tile.openstreetmap.fr/openriverboatmap/'
# Шаблон пути тайла относительно базового URL
TILE_URL_TEMPLATE = '{base_url}{z}/{x}/{y}.png'

# Максимальный уровень приближения (см. масштабы на сайте openstreetmap)
MAX_ZOOM = 19

# Путь к итоговому файлу по умолчанию
DEFAULT_OUTPUT_PATH = 'output.png'

# --- Константы Web Mercator
WORLD_LNG_SPAN_DEG = 360.0
WORLD_LNG_HALF_SPAN_DEG = 180.0
WORLD_LAT_MAX_DEG = 90.0
# Предельная широта проекции Web Mercator (квадратный мир)
MERCATOR_MAX_LAT_DEG = 85.05112878

# --- Дисковый кэш тайлов
# Корневой каталог кэша (относительные пути считаются от текущего каталога)
TILE_CACHE_DIR = '.cache'
# Расширение файлов в кэше
TILE_CACHE_SUFFIX = '.png'
# Максимальное число одновременных обращений к файловой системе кэша
MAX_PARALLEL_FS_OPERATIONS = 1000

# --- Параметры сетевых запросов
# Минимальный интервал между запросами к серверу тайлов (секунды)
REQUEST_MIN_INTERVAL_S = 0.1
HTTP_TIMEOUT_DEFAULT = 20.0
HTTP_OK = 200
# Публичные серверы тайлов отклоняют запросы без «браузерных» заголовков
HTTP_USER_AGENT = (
    'Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 '
    '(KHTML, like Gecko) Chrome/108.0.0.0 Safari/537.36'
)
HTTP_ACCEPT = (
    'text/html,application/xhtml+xml,application/xml;q=0.9,image/avif,'
    'image/webp,image/apng,*/*;q=0.8,application/signed-exchange;v=b3;q=0.9'
)

# --- Холст мозаики
# Число каналов (RGBA)
CANVAS_CHANNELS = 4
# Цвет фона (RGBA, непрозрачный белый)
CANVAS_BACKGROUND = (255, 255, 255, 255)
# Качество JPEG по умолчанию (10..100), для PNG не используется
JPEG_QUALITY_DEFAULT = 95
JPEG_QUALITY_MIN = 10
JPEG_QUALITY_MAX = 100
# Отключить защиту Pillow от «бомб декомпрессии» (холст может быть огромным)
PIL_DISABLE_LIMIT = True

# --- Логирование
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


class ExitCode(IntEnum):
    OK = 0
    MISSING_ARGUMENTS = 1
    INVALID_NUMBER = 2
    INVALID_OPTION = 3
    RUN_FAILED = 4
