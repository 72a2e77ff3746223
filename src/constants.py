class Alphabet:
    DIGITS = "0123456789"
    UPPERCASE = "ABCDEFGHIJKLMNOPQRSTUVWXYZ"
    CHARACTERS = DIGITS + UPPERCASE  # 분류 모델 학습 문자셋 (Inconsolata 폰트)


class Retry:
    MAX_RETRIES = 3
    BACKOFF_BASE = 2  # 초, attempt 마다 제곱


class Limits:
    MIN_CHAR_SIDE = 1  # 보정된 문자 이미지 최소 한 변 (px)
