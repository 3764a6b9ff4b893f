"""페이징/리디렉션 헬퍼 모듈입니다."""
