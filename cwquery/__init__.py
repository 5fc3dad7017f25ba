"""cwquery - CloudWatch 쿼리 API 파라미터 검증/인코딩 클라이언트"""

__version__ = "0.1.0"
