import argparse
import sys
from pathlib import Path


def _add_backend_to_path() -> None:
    repo_root = Path(__file__).resolve().parents[1]
    backend_root = repo_root / "backend"
    if str(backend_root) not in sys.path:
        sys.path.insert(0, str(backend_root))


def main() -> int:
    parser = argparse.ArgumentParser(
        description="Center-crop exported images into square thumbnails."
    )
    parser.add_argument("src_dir", help="宿主导出的原始图片目录")
    parser.add_argument("out_dir", help="缩略图输出目录")
    parser.add_argument(
        "--size",
        type=int,
        default=256,
        help="正方形边长(px)（默认：256）",
    )
    parser.add_argument(
        "--ext",
        default=".png",
        help="处理的图片扩展名（默认：.png）",
    )
    parser.add_argument(
        "--keep",
        action="store_true",
        help="保留原始图片（默认裁切后删除）",
    )
    args = parser.parse_args()

    _add_backend_to_path()
    from family_printer.render import crop_center, resolve_image_file_type  # type: ignore

    src_dir = Path(args.src_dir)
    out_dir = Path(args.out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    file_type = resolve_image_file_type(args.ext)

    inputs = sorted(p for p in src_dir.iterdir() if p.suffix.lower() == args.ext.lower())
    if not inputs:
        print("未找到可处理文件")
        return 1

    failed = 0
    for path in inputs:
        source = path
        if args.keep:
            source = out_dir / f"_{path.name}"
            source.write_bytes(path.read_bytes())
        ok = crop_center(source, out_dir / path.name, args.size, file_type)
        print(f"{path.name}: {'OK' if ok else 'SKIP'}")
        failed += 0 if ok else 1

    return 1 if failed else 0


if __name__ == "__main__":
    raise SystemExit(main())
