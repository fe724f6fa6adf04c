from flask import Blueprint, request, abort
from saveplate.decorators.auth import public
from saveplate.services.roi import estimate_savings, DEFAULT_BRACKET, LOCATION_MULTIPLIERS

marketing_bp = Blueprint('marketing', __name__)


@marketing_bp.get('/roi')
@public
def roi_estimate():
    """Annual savings estimate for a location-count bracket."""
    bracket = request.args.get('locations') or DEFAULT_BRACKET
    try:
        savings = estimate_savings(bracket)
    except ValueError as e:
        abort(400, description=str(e))
    return {'locations': bracket, 'brackets': list(LOCATION_MULTIPLIERS), 'savings': savings}
