"""
App layer: 웹 서버 (FastAPI + HTMX).

역할:
- 폼 페이지, 세션별 컨트롤러에 바인딩된 HTMX 엔드포인트
- /generate: повістка 이미지 생성 서비스

폴더 구분:
- src/app/templates/ → 페이지 템플릿 (Jinja2)
- src/client/templates/ → 표시 영역 fragment
"""
