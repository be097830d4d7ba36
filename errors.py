class NlsAssistantError(Exception):
    """Lỗi gốc; `str(err)` là thông báo tiếng Việt hiển thị cho người dùng."""


class ConfigurationError(NlsAssistantError):
    pass


class UpstreamError(NlsAssistantError):
    pass


MISSING_API_KEY = "Chưa có API Key. Vui lòng cấu hình GEMINI_API_KEY."
