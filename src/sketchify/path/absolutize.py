"""
Relative to absolute path command conversion.
"""

from sketchify.models import Segment


def absolutize(segments):
    """
    Rewrite every relative command as its absolute equivalent.

    Tracks the current point and the start of the current subpath, which
    a close command returns to.
    """
    cx, cy = 0.0, 0.0
    subx, suby = 0.0, 0.0
    out = []

    for segment in segments:
        key = segment.key
        data = segment.data

        if key == "M":
            out.append(Segment(key="M", data=list(data)))
            cx, cy = data
            subx, suby = cx, cy
        elif key == "m":
            cx += data[0]
            cy += data[1]
            out.append(Segment(key="M", data=[cx, cy]))
            subx, suby = cx, cy
        elif key == "L":
            out.append(Segment(key="L", data=list(data)))
            cx, cy = data
        elif key == "l":
            cx += data[0]
            cy += data[1]
            out.append(Segment(key="L", data=[cx, cy]))
        elif key == "C":
            out.append(Segment(key="C", data=list(data)))
            cx, cy = data[4], data[5]
        elif key == "c":
            new_data = [v + (cx if i % 2 == 0 else cy) for i, v in enumerate(data)]
            out.append(Segment(key="C", data=new_data))
            cx, cy = new_data[4], new_data[5]
        elif key in ("Q", "S"):
            out.append(Segment(key=key, data=list(data)))
            cx, cy = data[2], data[3]
        elif key in ("q", "s"):
            new_data = [v + (cx if i % 2 == 0 else cy) for i, v in enumerate(data)]
            out.append(Segment(key=key.upper(), data=new_data))
            cx, cy = new_data[2], new_data[3]
        elif key == "A":
            out.append(Segment(key="A", data=list(data)))
            cx, cy = data[5], data[6]
        elif key == "a":
            # Radii, rotation and flags are not positional
            cx += data[5]
            cy += data[6]
            out.append(Segment(key="A", data=[data[0], data[1], data[2], data[3], data[4], cx, cy]))
        elif key == "H":
            out.append(Segment(key="H", data=list(data)))
            cx = data[0]
        elif key == "h":
            cx += data[0]
            out.append(Segment(key="H", data=[cx]))
        elif key == "V":
            out.append(Segment(key="V", data=list(data)))
            cy = data[0]
        elif key == "v":
            cy += data[0]
            out.append(Segment(key="V", data=[cy]))
        elif key == "T":
            out.append(Segment(key="T", data=list(data)))
            cx, cy = data
        elif key == "t":
            cx += data[0]
            cy += data[1]
            out.append(Segment(key="T", data=[cx, cy]))
        elif key in ("Z", "z"):
            out.append(Segment(key="Z", data=[]))
            cx, cy = subx, suby

    return out
