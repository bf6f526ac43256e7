from pydantic import BaseModel, field_validator

from shared.constants import (
    DEFAULT_BASE_URL,
    DEFAULT_OUTPUT_PATH,
    JPEG_QUALITY_DEFAULT,
    JPEG_QUALITY_MAX,
    JPEG_QUALITY_MIN,
    MAX_PARALLEL_FS_OPERATIONS,
    MAX_ZOOM,
    REQUEST_MIN_INTERVAL_S,
    TILE_CACHE_DIR,
    WORLD_LAT_MAX_DEG,
    WORLD_LNG_HALF_SPAN_DEG,
)

LAT_LIMIT_DEG = WORLD_LAT_MAX_DEG
LON_LIMIT_DEG = WORLD_LNG_HALF_SPAN_DEG


class MosaicSettings(BaseModel):
    """Параметры одного запуска сборки мозаики."""

    model_config = {
        'frozen': True,
    }

    # Углы области (WGS84, градусы); порядок углов не важен
    lat_min: float
    lon_min: float
    lat_max: float
    lon_max: float
    zoom: int

    # Базовый URL тайлового сервера, к нему дописывается {z}/{x}/{y}.png
    base_url: str = DEFAULT_BASE_URL
    # Путь к итоговому файлу
    output_path: str = DEFAULT_OUTPUT_PATH
    # Качество JPEG (только для .jpg/.jpeg)
    jpeg_quality: int = JPEG_QUALITY_DEFAULT
    # Каталог дискового кэша тайлов
    cache_dir: str = TILE_CACHE_DIR
    # Подробный лог вместо прогресс-баров
    verbose: bool = False

    request_interval_s: float = REQUEST_MIN_INTERVAL_S
    max_parallel_fs: int = MAX_PARALLEL_FS_OPERATIONS

    @field_validator('lat_min', 'lat_max')
    @classmethod
    def validate_lat(cls, v: float | str) -> float:
        v = float(v)
        if not (-LAT_LIMIT_DEG <= v <= LAT_LIMIT_DEG):
            msg = f'latitude must be between -{LAT_LIMIT_DEG:g} and {LAT_LIMIT_DEG:g}'
            raise ValueError(msg)
        return v

    @field_validator('lon_min', 'lon_max')
    @classmethod
    def validate_lon(cls, v: float | str) -> float:
        v = float(v)
        if not (-LON_LIMIT_DEG <= v <= LON_LIMIT_DEG):
            msg = f'longitude must be between -{LON_LIMIT_DEG:g} and {LON_LIMIT_DEG:g}'
            raise ValueError(msg)
        return v

    @field_validator('zoom')
    @classmethod
    def validate_zoom(cls, v: int | str) -> int:
        v = int(v)
        if not (0 <= v <= MAX_ZOOM):
            msg = f'zoom must be between 0 and {MAX_ZOOM}'
            raise ValueError(msg)
        return v

    @field_validator('base_url')
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        v = str(v).strip()
        if not v:
            msg = 'base_url must not be empty'
            raise ValueError(msg)
        return v if v.endswith('/') else v + '/'

    @field_validator('jpeg_quality')
    @classmethod
    def validate_jpeg_quality(cls, v: int | str) -> int:
        v = int(v)
        if not (JPEG_QUALITY_MIN <= v <= JPEG_QUALITY_MAX):
            msg = (
                f'jpeg_quality must be between {JPEG_QUALITY_MIN} '
                f'and {JPEG_QUALITY_MAX}'
            )
            raise ValueError(msg)
        return v

    @field_validator('request_interval_s')
    @classmethod
    def validate_interval(cls, v: float | str) -> float:
        v = float(v)
        if v < 0:
            msg = 'request_interval_s must not be negative'
            raise ValueError(msg)
        return v

    @field_validator('max_parallel_fs')
    @classmethod
    def validate_max_parallel_fs(cls, v: int | str) -> int:
        v = int(v)
        if v < 1:
            msg = 'max_parallel_fs must be at least 1'
            raise ValueError(msg)
        return v
