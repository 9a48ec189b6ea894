from typing import List
import xml.etree.ElementTree as ET

from cutplan.core.errors import ExportBlocked
from cutplan.schemas import EditPlan, ExportPayload, TimeRange


def build_export_payload(plan: EditPlan) -> ExportPayload:
    """
    Final cut list for a downstream render adapter.
    Refuses plans whose integrity check failed.
    """
    if not plan.exportAllowed or plan.statistics is None:
        raise ExportBlocked(plan.warnings)

    return ExportPayload(
        sessionId=plan.sessionId,
        removals=sorted(plan.primary, key=lambda s: (s.start, s.end)),
        keepSegments=plan.keepSegments,
        statistics=plan.statistics,
    )


def generate_xml(keep_segments: List[TimeRange], framerate: int = 24, name: str = "Rough Cut") -> str:
    """
    Generates an FCP XML document from the kept ranges.
    Each kept range becomes one clipitem placed back to back on a single track.
    """
    root = ET.Element("xmeml", version="4")
    project = ET.SubElement(root, "project")
    project_name = ET.SubElement(project, "name")
    project_name.text = "Cut Plan Export"

    children = ET.SubElement(project, "children")
    sequence = ET.SubElement(children, "sequence")
    seq_name = ET.SubElement(sequence, "name")
    seq_name.text = name

    rate = ET.SubElement(sequence, "rate")
    timebase = ET.SubElement(rate, "timebase")
    timebase.text = str(framerate)
    ntsc = ET.SubElement(rate, "ntsc")
    ntsc.text = "FALSE"

    media = ET.SubElement(sequence, "media")
    video = ET.SubElement(media, "video")
    track = ET.SubElement(video, "track")

    timeline_frame = 0

    for i, keep in enumerate(keep_segments):
        start_frame = int(round(keep.start * framerate))
        end_frame = int(round(keep.end * framerate))
        duration_frames = end_frame - start_frame
        if duration_frames <= 0:
            continue

        clipitem = ET.SubElement(track, "clipitem", id=f"clipitem-{i}")
        clip_name = ET.SubElement(clipitem, "name")
        clip_name.text = f"Keep {i + 1}"

        dur = ET.SubElement(clipitem, "duration")
        dur.text = str(duration_frames)

        rate_item = ET.SubElement(clipitem, "rate")
        tb = ET.SubElement(rate_item, "timebase")
        tb.text = str(framerate)

        start_tag = ET.SubElement(clipitem, "start")
        start_tag.text = str(timeline_frame)

        end_tag = ET.SubElement(clipitem, "end")
        end_tag.text = str(timeline_frame + duration_frames)

        in_tag = ET.SubElement(clipitem, "in")
        in_tag.text = str(start_frame)

        out_tag = ET.SubElement(clipitem, "out")
        out_tag.text = str(end_frame)

        # Increment timeline position
        timeline_frame += duration_frames

    return ET.tostring(root, encoding="unicode", xml_declaration=True)
