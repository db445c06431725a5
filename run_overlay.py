"""
Guideline Overlay Demo
======================

Draws a guideline overlay on every frame of a video, the way a camera
preview would repaint it.

Architecture:
- config: OverlayConfig from YAML (or the ID-card default)
- engine: OverlayEngine (resolution, memoized per canvas size)
- rendering: OverlayVisualizer (mask, frames, decorations)

Usage:
    python run_overlay.py
    python run_overlay.py configs/face_and_document.yaml
"""

import os
import sys
from datetime import datetime

import supervision as sv

from guideline_overlay import OverlayConfig, OverlayEngine, OverlayVisualizer

VIDEO_PATH = "./data/videos/vehicles-1280x720.mp4"


def get_target_run_folder(application_name: str) -> str:
    # runs/<application>/<timestamp>
    target_run_folder = f"./runs/{application_name}/{datetime.now().strftime('%Y%m%d_%H%M%S')}"
    os.makedirs(target_run_folder, exist_ok=True)
    return target_run_folder


def process_video(video_path: str, config: OverlayConfig) -> str:
    target_video_path = f"{get_target_run_folder(application_name='overlay')}/output.mp4"

    video_info = sv.VideoInfo.from_video_path(video_path)
    # Every second frame is kept, so the output runs at half the source fps
    video_info.fps = video_info.fps // 2
    frames_generator = sv.get_video_frames_generator(video_path, stride=2)

    engine = OverlayEngine()
    visualizer = OverlayVisualizer()

    with sv.VideoSink(target_path=target_video_path, video_info=video_info) as sink:
        for frame in frames_generator:
            height, width = frame.shape[:2]
            result = engine.resolve(config, (width, height))
            sink.write_frame(visualizer.draw(frame, result))

    return target_video_path


def main():
    config = (
        OverlayConfig.from_yaml(sys.argv[1])
        if len(sys.argv) > 1
        else OverlayConfig.default()
    )

    print("🎬 Drawing guideline overlay...")
    print(f"  Video: {VIDEO_PATH}")
    print(f"  Shapes: {len(config.top_level_shapes)} top-level")

    output_path = process_video(VIDEO_PATH, config)

    print()
    print("✓ Overlay rendering completed!")
    print(f"  Output: {output_path}")


if __name__ == "__main__":
    main()
