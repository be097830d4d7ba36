from typing import List, Mapping, Tuple

from schema import (
    SuggestionRequest,
    LessonPlanRequest,
    IntegrationRequest,
    AssessmentRequest,
)


def grade_label(grade: str) -> str:
    if grade == "3":
        return "Lớp 3 (8-9 tuổi)"
    return f"Lớp {grade} (9-11 tuổi)"


def subject_name(subject: str) -> str:
    return "Tin học" if subject == "TinHoc" else "Công nghệ"


def format_nls_descriptions(codes: List[str], database: Mapping[str, str]) -> str:
    # Mã không có trong bảng -> mô tả rỗng, không báo lỗi
    return "\n".join(f"- **{code}:** {database.get(code) or ''}" for code in codes)


def build_suggestion_prompt(req: SuggestionRequest) -> Tuple[str, str]:
    """Trả về (system_instruction, user_prompt)."""
    subj = subject_name(req.subject)
    nls = format_nls_descriptions(req.nls_codes, req.nls_database)
    system = (
        f"Bạn là giáo viên {subj} tiểu học giàu kinh nghiệm. "
        "Nhiệm vụ: Gợi ý hoạt động dạy học sáng tạo phát triển Năng lực số (NLS) cho học sinh."
    )
    user = f"""
Gợi ý hoạt động cho bài: "{req.lesson_title}" ({grade_label(req.grade)}, {subj}).
Phát triển NLS:
{nls}
Yêu cầu:
- Trả lời bằng tiếng Việt, định dạng Markdown, ngắn gọn.
- Hoạt động phù hợp lứa tuổi, nêu rõ NLS mà mỗi hoạt động hướng tới.
"""
    return system, user


def build_lesson_plan_prompt(req: LessonPlanRequest) -> str:
    subj = subject_name(req.subject)
    nls = format_nls_descriptions(req.nls_codes, req.nls_database)
    return f"""
Bạn là giáo viên {subj} tiểu học. Hãy soạn giáo án chi tiết bài: "{req.lesson_title}" lớp {req.grade}, môn {subj}.
Tích hợp NLS:
{nls}
Dựa trên ý tưởng:
{req.initial_suggestion}
Yêu cầu:
- Trình bày Markdown: Mục tiêu, Chuẩn bị, Tiến trình dạy học (Khởi động, Khám phá, Luyện tập, Vận dụng).
- Ghi rõ NLS được phát triển ở từng hoạt động.
"""


def build_integration_prompt(req: IntegrationRequest) -> str:
    nls = format_nls_descriptions(req.nls_codes, req.nls_database)
    return f"""
Tích hợp các Năng lực số (NLS) sau vào giáo án môn {subject_name(req.subject)} lớp {req.grade}:
{nls}
Giữ nguyên cấu trúc và nội dung gốc, chỉ bổ sung hoạt động/ghi chú NLS vào đúng vị trí.
Trả về toàn bộ giáo án đã chỉnh sửa dạng Markdown.
Giáo án:
```markdown
{req.lesson_plan_content}
```
"""


def build_assessment_prompt(req: AssessmentRequest) -> str:
    subj = subject_name(req.subject)
    nls = format_nls_descriptions(req.nls_codes, req.nls_database)
    head = f'cho bài: "{req.lesson_title}" lớp {req.grade}, môn {subj}.\nNLS:\n{nls}\n'
    if req.assessment_type == "rubric":
        return f"""
Tạo phiếu đánh giá (Rubric) {head}Yêu cầu:
- Trình bày dạng bảng Markdown (Markdown Table), 3-4 mức độ (ví dụ: Chưa đạt, Đạt, Tốt, Xuất sắc).
- Tiêu chí bám sát NLS ở trên, ngôn ngữ phù hợp học sinh {grade_label(req.grade)}.
- Lời nhận xét mang tính khích lệ, động viên.
"""
    return f"""
Tạo 5 câu hỏi trắc nghiệm {head}Yêu cầu:
- Đúng 5 câu, mỗi câu có 4 lựa chọn A, B, C, D, chỉ một đáp án đúng.
- Cuối bài có đáp án (Answer Key) kèm giải thích ngắn gọn cho từng câu.
- Ngôn ngữ phù hợp học sinh {grade_label(req.grade)}, định dạng Markdown.
"""
