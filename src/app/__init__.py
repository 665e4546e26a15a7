"""
App layer: 웹 서버 (FastAPI + Jinja2).

역할:
- 위저드 화면, 프레임 카탈로그, 합성 API
- 이미지 생성 서비스 호출 (providers)
- ⚠️ 검증/정리 로직은 core, domain에 위임

주의: 폴더 구분
- src/app/templates/ → Jinja2 HTML
- src/app/static/ → CSS, JS, 프레임 이미지
"""
