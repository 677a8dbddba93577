"""
Media routes.
Handles uploads of images, video and audio for profiles, listings and skill
verification, and serves the stored files.
"""
import logging
import os
import time
import uuid

from flask import Blueprint, current_app, jsonify, request, send_from_directory
from werkzeug.utils import secure_filename

from hustlx import db
from hustlx.auth import current_identity, require_auth
from hustlx.errors import Forbidden, NotFound, ValidationError
from hustlx.models import Listing, Media, Skill, User
from hustlx.models.media import MEDIA_TYPES
from hustlx.schemas import UploadForm, validate_payload

logger = logging.getLogger(__name__)

media_bp = Blueprint('media', __name__)
uploads_bp = Blueprint('uploads', __name__)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------
def _upload_folder():
    folder = current_app.config['UPLOAD_FOLDER']
    os.makedirs(folder, exist_ok=True)
    return folder


def _media_type(mimetype):
    """image/png -> image; None for anything that is not image, video or audio"""
    prefix = (mimetype or '').split('/', 1)[0].lower()
    return prefix if prefix in MEDIA_TYPES else None


def _unique_filename(original):
    """<uuid>-<epoch ms><ext>, keeping only a sanitized extension"""
    ext = os.path.splitext(secure_filename(original or ''))[1].lower()
    return f'{uuid.uuid4()}-{int(time.time() * 1000)}{ext}'


def _check_parent(form, user_id):
    """The skill or listing a file is attached to must belong to the uploader"""
    if form.skill_id is not None:
        skill = Skill.get_or_404(form.skill_id, 'Skill not found')
        if skill.homemaker_id != user_id:
            raise Forbidden("You don't have permission to attach media to this skill")
    if form.listing_id is not None:
        listing = Listing.get_or_404(form.listing_id)
        if not listing.is_owned_by(user_id):
            raise Forbidden("You don't have permission to attach media to this listing")


def _media_list(query):
    items = query.order_by(Media.created_at.desc(), Media.id.desc()).all()
    return jsonify({'media': [item.to_dict() for item in items]}), 200


# ---------------------------------------------------------------------------
# POST /api/upload  (auth required)
# ---------------------------------------------------------------------------
@media_bp.route('/upload', methods=['POST'])
@require_auth
def upload():
    """
    Upload a single file (multipart/form-data).

    Form fields:
        file: the upload (required)
        purpose: skill_verification | listing | profile (required)
        skill_id / listing_id: optional, at most one
    Returns: { media }
    """
    file = request.files.get('file')
    if file is None or not file.filename:
        raise ValidationError('No file uploaded')

    media_type = _media_type(file.mimetype)
    if media_type is None:
        raise ValidationError('Invalid file type. Only images, videos and audio files are allowed.')

    fields = {key: value for key, value in request.form.items() if value != ''}
    form = validate_payload(UploadForm, fields)

    user_id = current_identity().user_id
    _check_parent(form, user_id)

    filename = _unique_filename(file.filename)
    file.save(os.path.join(_upload_folder(), filename))

    media = Media(
        user_id=user_id,
        type=media_type,
        url=f'/uploads/{filename}',
        purpose=form.purpose,
        skill_id=form.skill_id,
        listing_id=form.listing_id,
    )
    db.session.add(media)
    db.session.commit()

    logger.info('User %s uploaded %s %s', user_id, media_type, filename)
    return jsonify({'media': media.to_dict()}), 201


# ---------------------------------------------------------------------------
# Public media reads
# ---------------------------------------------------------------------------
@media_bp.route('/media/user/<int:user_id>', methods=['GET'])
def user_media(user_id):
    User.get_or_404(user_id, 'User not found')
    query = Media.query.filter_by(user_id=user_id)
    purpose = request.args.get('purpose')
    if purpose:
        query = query.filter_by(purpose=purpose)
    return _media_list(query)


@media_bp.route('/media/skill/<int:skill_id>', methods=['GET'])
def skill_media(skill_id):
    Skill.get_or_404(skill_id, 'Skill not found')
    return _media_list(Media.query.filter_by(skill_id=skill_id))


@media_bp.route('/media/listing/<int:listing_id>', methods=['GET'])
def listing_media(listing_id):
    Listing.get_or_404(listing_id)
    return _media_list(Media.query.filter_by(listing_id=listing_id))


# ---------------------------------------------------------------------------
# DELETE /api/media/<id>  (uploader only)
# ---------------------------------------------------------------------------
@media_bp.route('/media/<int:media_id>', methods=['DELETE'])
@require_auth
def delete_media(media_id):
    media = Media.get_or_404(media_id, 'Media not found')
    if media.user_id != current_identity().user_id:
        raise Forbidden("You don't have permission to delete this media")

    path = os.path.join(current_app.config['UPLOAD_FOLDER'], media.filename)
    db.session.delete(media)
    db.session.commit()

    try:
        os.remove(path)
    except FileNotFoundError:
        logger.warning('Media %s file %s was already gone', media_id, path)

    return '', 204


# ---------------------------------------------------------------------------
# GET /uploads/<filename>  (public -- serve uploaded files)
# ---------------------------------------------------------------------------
@uploads_bp.route('/uploads/<filename>', methods=['GET'])
def serve_upload(filename):
    """Serve a previously uploaded file."""
    safe_name = secure_filename(filename)
    folder = current_app.config['UPLOAD_FOLDER']
    if not safe_name or not os.path.exists(os.path.join(folder, safe_name)):
        raise NotFound('File not found')

    return send_from_directory(os.path.abspath(folder), safe_name)
