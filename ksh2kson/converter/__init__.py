from .camera import build_camera
from .kson import assemble_document, convert_chart, ksh2kson
from .lasers import build_lane, build_laser_graphs
from .notes import decode_lane, decode_notes
from .timing import TimingState, resolve_timing
