import logging

from django.conf import settings
from django.http import HttpRequest, HttpResponse, HttpResponseBadRequest
from django.shortcuts import redirect, render
from django.views import View
from PIL import ImageFont

from khajiit_wares import config
from khajiit_wares.engine import ALT_TEXT, compose
from khajiit_wares.errors import DecodeError, EngineError
from khajiit_wares.meme_text_renderer import load_font

logger = logging.getLogger(__name__)


def shared_font() -> ImageFont.FreeTypeFont:
    return load_font(settings.CAPTION_FONT_PATH)


class IndexView(View):
    template_name = "index.html"

    def get(self, request: HttpRequest) -> HttpResponse:
        if settings.REDIRECT_URL:
            return redirect(settings.REDIRECT_URL)
        ctx = {
            "top_text": config.TOP_TEXT,
            "bottom_text": config.BOTTOM_TEXT,
        }
        return render(request, self.template_name, context=ctx)


class MemeView(View):
    def post(self, request: HttpRequest) -> HttpResponse:
        photo = request.FILES.get("photo")
        if photo is None:
            return HttpResponseBadRequest("Missing 'photo' upload.")

        top_text = request.POST.get("top_text") or config.TOP_TEXT
        bottom_text = request.POST.get("bottom_text") or config.BOTTOM_TEXT

        try:
            jpeg = compose(photo.read(), top_text, bottom_text, shared_font())
        except DecodeError as error:
            logger.warning("Rejected upload %s: %s", photo.name, error)
            return HttpResponseBadRequest(str(error))
        except EngineError as error:
            logger.warning("Unable to caption upload %s: %s", photo.name, error)
            return HttpResponse(str(error), status=422, content_type="text/plain")

        logger.info("Captioned upload %s (%d bytes out)", photo.name, len(jpeg))
        response = HttpResponse(jpeg, content_type="image/jpeg")
        response["X-Alt-Text"] = ALT_TEXT
        return response
