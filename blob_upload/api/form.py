"""Upload form page."""

from html import escape

from robyn import Response, status_codes

from blob_upload.core.router import Router
from blob_upload.core.settings import settings as st

router = Router(__file__)

FORM_TEMPLATE = """<!DOCTYPE html>
<html>
<head><meta charset="utf-8"><title>{title}</title></head>
<body>
<form action="{action}" method="post" enctype="multipart/form-data">
    <input type="file" name="{field}">
    <input type="submit" value="Upload File">
</form>
</body>
</html>
"""


def render_upload_form(action: str | None = None, field: str | None = None) -> str:
    return FORM_TEMPLATE.format(
        title=escape(st.API_NAME),
        action=escape(action or st.UPLOAD_ENDPOINT, quote=True),
        field=escape(field or st.UPLOAD_FIELD, quote=True),
    )


async def upload_form():
    return Response(
        status_code=status_codes.HTTP_200_OK,
        headers={"content-type": "text/html; charset=utf-8"},
        description=render_upload_form(),
    )


router.get(st.FORM_PATH)(upload_form)
