import os
import json
import argparse
import matplotlib.pyplot as plt
import pandas as pd
from tqdm import tqdm
import sys

# Add the parent directory to the path to import from other modules
sys.path.append(os.path.dirname(os.path.abspath(__file__)))
from utils.image_preprocessing import ImagePreprocessor
from utils.region_sampler import SkinSampler
from utils.personal_color_analyzer import PersonalColorAnalyzer

try:
    from utils.face_detection import FaceDetector
    FACE_DETECTION_AVAILABLE = True
except ImportError:
    FACE_DETECTION_AVAILABLE = False

FAILURE_MESSAGE = "Analysis failed. Make sure the image contains a visible face."


class PersonalColorApp:
    """
    Main application for personal color analysis
    """
    def __init__(self,
                 output_dir=None,
                 face_detector=None,
                 use_face_detection=True,
                 seed=42,
                 target_width=480):
        """
        Initialize the personal color analysis application

        Parameters:
        ----------
        output_dir : str, optional
            Directory to save face cutouts and reports into (default: don't save)
        face_detector : object, optional
            Detector exposing `detect(image) -> FaceDescriptor or None`
        use_face_detection : bool
            Whether to look for a face at all; the center region is used otherwise
        seed : int
            Seed of the skin color sampler
        target_width : int
            Working width images are scaled to before analysis
        """
        self.output_dir = output_dir

        self.preprocessor = ImagePreprocessor(target_width=target_width)
        self.analyzer = PersonalColorAnalyzer(
            preprocessor=self.preprocessor,
            sampler=SkinSampler(seed=seed)
        )

        self.face_detector = face_detector
        if self.face_detector is None and use_face_detection:
            if FACE_DETECTION_AVAILABLE:
                self.face_detector = FaceDetector()
            else:
                print("face_recognition is not installed. Faces will not be detected.")

    def process_image(self, image_path, output_dir=None):
        """
        Process an image for personal color analysis

        Parameters:
        ----------
        image_path : str
            Path to the input image (a file:// prefix is accepted)
        output_dir : str, optional
            Directory to save the cutout into (default: the app's output_dir)

        Returns:
        -------
        PersonalColorResult or None
            Analysis results, or None if the analysis failed
        """
        image = self.preprocessor.load_image(image_path)

        if image is None:
            print(f"Error reading image: {image_path}")
            print(FAILURE_MESSAGE)
            return None

        image = self.preprocessor.resize(image)

        face = None
        if self.face_detector is not None:
            face = self.face_detector.detect(image)
            if face is None:
                print("No face detected in the image")

        try:
            result = self.analyzer.analyze(image, face)
        except ValueError as e:
            print(f"Error analyzing image {image_path}: {e}")
            print(FAILURE_MESSAGE)
            return None

        output_dir = output_dir or self.output_dir
        if output_dir is not None:
            prefix = 'face' if result.background_removed else 'center_region'
            result.face_image_path = self.preprocessor.save_png(result.cutout, output_dir, prefix)

        return result

    def visualize_results(self, result):
        """
        Visualize the personal color analysis results

        Parameters:
        ----------
        result : PersonalColorResult
            Results from process_image method

        Returns:
        -------
        None
        """
        if result is None:
            print("No results to visualize")
            return

        self.analyzer.visualize_results(result)
        plt.show()

    def save_report(self, result, image_path, output_dir):
        """
        Write a text and a JSON report next to the saved cutout

        Returns:
        -------
        str
            Path of the text report
        """
        os.makedirs(output_dir, exist_ok=True)
        base_name = os.path.splitext(os.path.basename(image_path))[0]

        text_output_path = os.path.join(output_dir, f"{base_name}_analysis.txt")
        c = result.classification
        with open(text_output_path, 'w') as f:
            f.write(f"Image: {image_path}\n")
            f.write(f"Skin RGB: {result.r}, {result.g}, {result.b}\n")
            f.write(f"Undertone: {c.undertone} ({c.undertone_detail})\n")
            f.write(f"Season: {c.season_full}\n")
            f.write(f"Contrast: {result.features.contrast_level}\n")
            f.write(f"Intensity: {result.features.intensity_level}\n")
            f.write(f"Face detected: {result.face_detected}\n")
            f.write(f"Face image: {result.face_image_path}\n")
            f.write("Palettes:\n")
            for palette in result.palettes:
                f.write(f"  {palette.name}: {' '.join(palette.colors)}\n")

        json_output_path = os.path.join(output_dir, f"{base_name}_analysis.json")
        with open(json_output_path, 'w') as f:
            json.dump(result.to_dict(), f, indent=2)

        return text_output_path

    def batch_process(self, image_dir, output_dir=None):
        """
        Process all images in a directory

        Parameters:
        ----------
        image_dir : str
            Directory containing images to process
        output_dir : str, optional
            Directory to save analysis results (default: the app's output_dir)

        Returns:
        -------
        list
            List of analysis results for each image
        """
        output_dir = output_dir or self.output_dir
        if output_dir is not None:
            os.makedirs(output_dir, exist_ok=True)

        # Get all image files
        image_files = []
        for file in sorted(os.listdir(image_dir)):
            if file.lower().endswith(('.png', '.jpg', '.jpeg')):
                image_files.append(os.path.join(image_dir, file))

        results_list = []
        summary_rows = []

        for img_path in tqdm(image_files, desc="Analyzing"):
            result = self.process_image(img_path, output_dir)

            if result is None:
                summary_rows.append({'image': img_path, 'status': 'failed'})
                continue

            results_list.append(result)
            c = result.classification
            summary_rows.append({
                'image': img_path,
                'status': 'ok',
                'r': result.r,
                'g': result.g,
                'b': result.b,
                'undertone': c.undertone,
                'undertone_detail': c.undertone_detail,
                'season': c.season,
                'season_category': c.season_category,
                'contrast': result.features.contrast_level,
                'intensity': result.features.intensity_level,
                'face_detected': result.face_detected,
                'face_image_path': result.face_image_path,
            })

            if output_dir is not None:
                self.save_report(result, img_path, output_dir)

        if output_dir is not None:
            summary_path = os.path.join(output_dir, 'summary.csv')
            pd.DataFrame(summary_rows).to_csv(summary_path, index=False)
            print(f"Summary saved to {summary_path}")

        return results_list


def main():
    """Main function to run the application from the command line"""
    parser = argparse.ArgumentParser(description='Personal Color Analysis')

    # Input arguments
    parser.add_argument('--image', type=str, help='Path to input image')
    parser.add_argument('--image_dir', type=str, help='Directory containing input images')
    parser.add_argument('--output_dir', type=str, help='Directory to save output')

    # Analysis arguments
    parser.add_argument('--seed', type=int, default=42, help='Seed of the skin color sampler')
    parser.add_argument('--width', type=int, default=480, help='Working image width')
    parser.add_argument('--no_face_detection', action='store_true', help='Always analyze the center region')

    # Visualization
    parser.add_argument('--no_vis', action='store_true', help='Disable visualization')

    args = parser.parse_args()

    # Check if either image or image_dir is provided
    if args.image is None and args.image_dir is None:
        parser.error('Either --image or --image_dir must be provided')

    app = PersonalColorApp(
        output_dir=args.output_dir,
        use_face_detection=not args.no_face_detection,
        seed=args.seed,
        target_width=args.width
    )

    # Process single image
    if args.image is not None:
        result = app.process_image(args.image)

        if result is None:
            return 1

        c = result.classification
        print(f"Skin RGB: {result.r}, {result.g}, {result.b}")
        print(f"Undertone: {c.undertone} ({c.undertone_detail})")
        print(f"Season: {c.season_full}")
        for palette in result.palettes:
            print(f"  {palette.name}: {' '.join(palette.colors)}")

        if args.output_dir is not None:
            app.save_report(result, args.image, args.output_dir)

        if not args.no_vis:
            app.visualize_results(result)

    # Process directory of images
    elif args.image_dir is not None:
        results_list = app.batch_process(args.image_dir, args.output_dir)
        print(f"Processed {len(results_list)} images.")

    return 0


if __name__ == '__main__':
    sys.exit(main())
